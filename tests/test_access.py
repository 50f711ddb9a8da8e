import uuid
from datetime import datetime, timedelta

from conftest import transient_item
from datavault.core.access import can_access, remove_grant, upsert_grant
from datavault.models.data_item import AccessLevel


def test_owner_has_every_level_without_grants():
    owner = uuid.uuid4()
    item = transient_item(owner_id=owner)
    for level in AccessLevel:
        assert can_access(item, owner, level)


def test_stranger_without_grant_is_denied():
    item = transient_item()
    assert not can_access(item, uuid.uuid4(), AccessLevel.read)


def test_level_ordering():
    reader, writer, admin = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    item = transient_item()
    upsert_grant(item, reader, AccessLevel.read)
    upsert_grant(item, writer, AccessLevel.write)
    upsert_grant(item, admin, AccessLevel.admin)

    assert can_access(item, reader, AccessLevel.read)
    assert not can_access(item, reader, AccessLevel.write)
    assert not can_access(item, reader, AccessLevel.admin)

    assert can_access(item, writer, AccessLevel.read)
    assert can_access(item, writer, AccessLevel.write)
    assert not can_access(item, writer, AccessLevel.admin)

    assert all(can_access(item, admin, level) for level in AccessLevel)


def test_expired_grant_does_not_satisfy_read():
    grantee = uuid.uuid4()
    now = datetime.utcnow()
    item = transient_item()
    upsert_grant(item, grantee, AccessLevel.admin, expires_at=now - timedelta(seconds=1))

    assert not can_access(item, grantee, AccessLevel.read, now=now)


def test_grant_expiring_later_is_active_until_the_instant():
    grantee = uuid.uuid4()
    expires = datetime(2030, 1, 1, 12, 0, 0)
    item = transient_item()
    upsert_grant(item, grantee, AccessLevel.read, expires_at=expires)

    assert can_access(item, grantee, now=expires - timedelta(microseconds=1))
    assert not can_access(item, grantee, now=expires)


def test_regrant_replaces_in_place():
    first, second = uuid.uuid4(), uuid.uuid4()
    item = transient_item()
    upsert_grant(item, first, AccessLevel.read)
    upsert_grant(item, second, AccessLevel.read)

    upsert_grant(item, first, AccessLevel.admin)

    assert len(item.access_control) == 2
    assert [g.grantee_id for g in item.access_control] == [first, second]
    assert item.access_control[0].access_level == AccessLevel.admin


def test_regrant_without_expiry_keeps_previous_expiry():
    grantee = uuid.uuid4()
    expires = datetime(2031, 5, 1)
    item = transient_item()
    upsert_grant(item, grantee, AccessLevel.read, expires_at=expires)

    upsert_grant(item, grantee, AccessLevel.write)

    assert item.access_control[0].expires_at == expires


def test_remove_grant_is_idempotent():
    grantee = uuid.uuid4()
    item = transient_item()
    upsert_grant(item, grantee, AccessLevel.read)

    assert remove_grant(item, grantee) is True
    assert remove_grant(item, grantee) is False
    assert item.access_control == []
    assert not can_access(item, grantee)

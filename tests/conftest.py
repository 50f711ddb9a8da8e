import asyncio
import os
import uuid
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from datavault.database import Base, get_db
from datavault.main import app
from datavault.models import DataItem, User
from datavault.routes.auth import login_limiter

WALLET = "0x52908400098527886E0F7030069857D2E4169EE7"


@pytest.fixture
def session_factory(tmp_path):
    # file database + NullPool: every connection is opened on the loop using it
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}", poolclass=NullPool)

    async def init_db():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    asyncio.run(init_db())

    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(db)`` inside a fresh session and return its result."""
    def run(fn):
        async def call():
            async with session_factory() as db:
                return await fn(db)
        return asyncio.run(call())
    return run


@pytest.fixture
def make_user(run_db):
    def make(email: str, name: str = "Test User") -> User:
        async def create(db):
            user = User(email=email, name=name, password_hash="unused", wallet_address=WALLET)
            db.add(user)
            await db.commit()
            return user
        return run_db(create)
    return make


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session
    app.dependency_overrides[get_db] = override_get_db
    login_limiter.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user through the API and return auth headers plus the user id."""
    def do_register(email: str, name: str = "Test User", password: str = "strongpass"):
        r = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert r.status_code == 200, r.text
        headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
        me = client.get("/api/auth/user", headers=headers)
        assert me.status_code == 200
        return headers, me.json()["id"]
    return do_register


def transient_item(owner_id=None, data="secret", **kwargs) -> DataItem:
    """An unsaved DataItem with every column the domain code reads filled in."""
    now = datetime.utcnow()
    fields = dict(
        id=uuid.uuid4(),
        owner_id=owner_id or uuid.uuid4(),
        title="Passport",
        category="personal",
        data=data,
        tags=[],
        is_encrypted=True,
        blockchain_verified=False,
        date_created=now,
        last_updated=now,
    )
    fields.update(kwargs)
    return DataItem(**fields)

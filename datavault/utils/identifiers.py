import secrets
import string

from eth_account import Account

TX_ID_PREFIX = "tx_"
TX_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_tx_id(length: int = 13) -> str:
    """Generate a synthetic blockchain transaction id.

    The id is ``tx_`` followed by ``length`` lowercase base36 characters.
    No ledger is involved, so uniqueness rests on the randomness alone.
    """
    return TX_ID_PREFIX + "".join(secrets.choice(TX_ID_ALPHABET) for _ in range(length))


def generate_wallet_address() -> str:
    """Return the checksummed address of a freshly generated Ethereum account.

    The private key is discarded; the address is only an identifier.
    """
    return Account.create().address

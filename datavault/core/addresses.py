import re

from eth_utils import is_checksum_address

_re_eth = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_eth(addr: str) -> bool:
    """Accept all-lowercase, all-uppercase or EIP-55 checksummed addresses."""
    if not _re_eth.match(addr or ""):
        return False
    body = addr[2:]
    if body == body.lower() or body == body.upper():
        return True
    return is_checksum_address(addr)


def normalize_wallet_address(addr: str) -> str:
    addr = (addr or "").strip()
    if not is_eth(addr):
        raise ValueError("Invalid Ethereum wallet address")
    return addr

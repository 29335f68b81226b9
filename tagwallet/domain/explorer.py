"""Block explorer links derived from wallet addresses."""
from __future__ import annotations

EXPLORER_URL_TEMPLATE = "https://blockexplorer.minepi.com/mainnet/accounts/{wallet_address}"


def explorer_link(wallet_address: str) -> str:
    """Pure function of the address: create and update must agree exactly."""
    return EXPLORER_URL_TEMPLATE.format(wallet_address=wallet_address)

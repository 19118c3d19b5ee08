"""Interop with other Ethereum libraries."""
from .web3_integration import (
    ether_to_wei_hex,
    state_override_from_web3,
    state_override_to_web3,
    transaction_call_from_tx_params,
    transaction_call_to_tx_params,
    transaction_calls_from_tx_params,
    wei_hex_to_ether,
)

__all__ = [
    "ether_to_wei_hex",
    "state_override_from_web3",
    "state_override_to_web3",
    "transaction_call_from_tx_params",
    "transaction_call_to_tx_params",
    "transaction_calls_from_tx_params",
    "wei_hex_to_ether",
]

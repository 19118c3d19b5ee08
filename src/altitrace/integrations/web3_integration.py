"""Conversion between web3.py types and Altitrace request models."""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from eth_utils import to_hex
from web3 import Web3
from web3.types import StateOverride as Web3StateOverride
from web3.types import StateOverrideParams, TxParams

from ..core.errors import ValidationError
from ..core.validation import hex_to_int, is_address
from ..models.common import (
    AccessListItem,
    StateOverride,
    StateOverrideInput,
    TransactionCall,
    coerce_model,
)


def _checksum(address: Optional[str], field: str) -> Optional[str]:
    if address is None:
        return None
    if not is_address(address):
        raise ValidationError(f'Invalid "{field}" address: {address}')
    return Web3.to_checksum_address(address)


def _data_to_hex(data: Any) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        return to_hex(data)
    if isinstance(data, str):
        return data if data.startswith("0x") else f"0x{data}"
    raise ValidationError(f"Unsupported data type: {type(data).__name__}")


def transaction_call_from_tx_params(tx: TxParams) -> TransactionCall:
    """
    Convert a web3.py transaction dict into a TransactionCall.

    Args:
        tx: Dict with any of ``from``, ``to``, ``data``, ``value``, ``gas``, ``accessList``

    Returns:
        TransactionCall with hex-encoded quantities
    """
    access_list = tx.get("accessList")
    return TransactionCall(
        to=_checksum(tx.get("to"), "to"),
        from_=_checksum(tx.get("from"), "from"),
        data=_data_to_hex(tx.get("data")),
        value=tx.get("value"),
        gas=tx.get("gas"),
        access_list=[
            AccessListItem(
                address=entry["address"],
                storage_keys=[_data_to_hex(key) for key in entry.get("storageKeys", [])],
            )
            for entry in access_list
        ] if access_list else None,
    )


def transaction_call_to_tx_params(call: TransactionCall) -> TxParams:
    """Convert a TransactionCall into a web3.py transaction dict with integer quantities."""
    tx: TxParams = {}
    if call.from_ is not None:
        tx["from"] = Web3.to_checksum_address(call.from_)
    if call.to is not None:
        tx["to"] = Web3.to_checksum_address(call.to)
    if call.data is not None:
        tx["data"] = call.data
    if call.value is not None:
        tx["value"] = hex_to_int(call.value)
    if call.gas is not None:
        tx["gas"] = hex_to_int(call.gas)
    if call.access_list:
        tx["accessList"] = [
            {"address": item.address, "storageKeys": list(item.storage_keys)}
            for item in call.access_list
        ]
    return tx


def transaction_calls_from_tx_params(txs: Iterable[TxParams]) -> List[TransactionCall]:
    return [transaction_call_from_tx_params(tx) for tx in txs]


def ether_to_wei_hex(amount: Union[int, float, str, Decimal]) -> str:
    """Ether amount as a hex wei quantity, e.g. for ``value`` or balance overrides."""
    return hex(Web3.to_wei(amount, "ether"))


def wei_hex_to_ether(value: str) -> Decimal:
    return Web3.from_wei(hex_to_int(value), "ether")


def _slots_to_hex(slots: Optional[Dict[Any, Any]]) -> Optional[Dict[str, str]]:
    if slots is None:
        return None
    return {_data_to_hex(slot): _data_to_hex(value) for slot, value in slots.items()}


def state_override_from_web3(overrides: Web3StateOverride) -> List[StateOverride]:
    """
    Convert a web3.py state override mapping into Altitrace overrides.

    Args:
        overrides: ``{address: {"balance", "nonce", "code", "state", "stateDiff"}}`` as
            accepted by ``eth.call``; balances are integer wei

    Returns:
        One StateOverride per address, in mapping order
    """
    result = []
    for address, params in overrides.items():
        result.append(StateOverride(
            address=_checksum(address, "state override"),
            balance=params.get("balance"),
            nonce=params.get("nonce"),
            code=_data_to_hex(params.get("code")),
            state=_slots_to_hex(params.get("state")),
            state_diff=_slots_to_hex(params.get("stateDiff")),
        ))
    return result


def state_override_to_web3(overrides: Sequence[StateOverrideInput]) -> Web3StateOverride:
    """
    Convert Altitrace overrides into the mapping web3.py passes to ``eth.call``.

    Overrides for the same address are merged. ``storage`` and
    ``movePrecompileToAddress`` have no web3.py equivalent and are dropped.

    Raises:
        ValidationError: An override has no address or an invalid one
    """
    merged: Dict[str, StateOverride] = {}
    for override in overrides:
        override = coerce_model(StateOverride, override, "state override")
        if not override.address:
            raise ValidationError("State override requires an address")
        key = _checksum(override.address, "state override")
        existing = merged.get(key)
        merged[key] = existing.merged_with(override) if existing else override

    result: Web3StateOverride = {}
    for address, override in merged.items():
        params: StateOverrideParams = {}
        if override.balance is not None:
            params["balance"] = hex_to_int(override.balance)
        if override.nonce is not None:
            params["nonce"] = override.nonce
        if override.code is not None:
            params["code"] = override.code
        if override.state is not None:
            params["state"] = dict(override.state)
        if override.state_diff is not None:
            params["stateDiff"] = dict(override.state_diff)
        result[address] = params
    return result

"""Factories for common transactions, overrides, bundles and tracer presets."""
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..core.validation import to_hex
from ..models.common import AccessListItem, BlockOverrides, StateOverride, TransactionCall
from ..models.trace import (
    Bundle,
    CallTracerConfig,
    PrestateTracerConfig,
    StateContext,
    StructLoggerConfig,
    TraceConfig,
    TransactionIndex,
)

Quantity = Union[int, str]

# Common gas limits
GAS_LIMITS = {
    "ETH_TRANSFER": 21_000,
    "ERC20_TRANSFER": 65_000,
    "ERC20_APPROVE": 50_000,
    "UNISWAP_SWAP": 200_000,
    "CONTRACT_DEPLOY": 2_000_000,
    "BLOCK_GAS_LIMIT": 30_000_000,
}

# Mainnet addresses used in examples and tests
COMMON_ADDRESSES = {
    "ZERO": "0x0000000000000000000000000000000000000000",
    "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    "USDC": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    "USDT": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
    "DAI": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
    "UNISWAP_V2_ROUTER": "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",
    "UNISWAP_V3_ROUTER": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
}


class TransactionHelpers:
    """Shortcuts for building common TransactionCall shapes."""

    @staticmethod
    def eth_transfer(to: str, value: Quantity, from_: Optional[str] = None) -> TransactionCall:
        return TransactionCall(to=to, from_=from_, value=value, gas=GAS_LIMITS["ETH_TRANSFER"])

    @staticmethod
    def contract_call(
        to: str,
        data: str,
        from_: Optional[str] = None,
        value: Optional[Quantity] = None,
        gas: Optional[Quantity] = None,
    ) -> TransactionCall:
        return TransactionCall(to=to, data=data, from_=from_, value=value, gas=gas)

    @staticmethod
    def contract_deploy(bytecode: str, from_: Optional[str] = None, gas: Optional[Quantity] = None) -> TransactionCall:
        """Creation call: no ``to``, bytecode as data."""
        return TransactionCall(data=bytecode, from_=from_, gas=gas)


class StateOverrideHelpers:
    """Single-purpose state overrides, carrying their address."""

    @staticmethod
    def set_balance(address: str, balance: Quantity) -> StateOverride:
        return StateOverride(address=address, balance=balance)

    @staticmethod
    def set_nonce(address: str, nonce: int) -> StateOverride:
        return StateOverride(address=address, nonce=nonce)

    @staticmethod
    def set_code(address: str, code: str) -> StateOverride:
        return StateOverride(address=address, code=code)

    @staticmethod
    def set_storage(address: str, slots: Dict[str, str]) -> StateOverride:
        """Replace the listed slots, leaving the rest of storage untouched."""
        return StateOverride(address=address, state_diff=dict(slots))

    @staticmethod
    def set_account(
        address: str,
        balance: Optional[Quantity] = None,
        nonce: Optional[int] = None,
        code: Optional[str] = None,
        storage: Optional[Dict[str, str]] = None,
    ) -> StateOverride:
        return StateOverride(address=address, balance=balance, nonce=nonce, code=code, state_diff=storage)

    @staticmethod
    def as_mapping(overrides: Iterable[StateOverride]) -> Dict[str, StateOverride]:
        """Convert address-carrying overrides into the map keyed by address used by trace calls."""
        mapping: Dict[str, StateOverride] = {}
        for override in overrides:
            key = override.address.lower()
            body = override.model_copy(update={"address": None})
            existing = mapping.get(key)
            mapping[key] = existing.merged_with(body) if existing else body
        return mapping


class BlockOverrideHelpers:

    @staticmethod
    def set_timestamp(timestamp: int) -> BlockOverrides:
        return BlockOverrides(time=timestamp)

    @staticmethod
    def set_block_number(number: Quantity) -> BlockOverrides:
        return BlockOverrides(number=number)

    @staticmethod
    def set_gas_params(gas_limit: Optional[int] = None, base_fee: Optional[Quantity] = None) -> BlockOverrides:
        return BlockOverrides(gas_limit=gas_limit, base_fee=base_fee)

    @staticmethod
    def set_coinbase(coinbase: str) -> BlockOverrides:
        return BlockOverrides(coinbase=coinbase)


class BundleHelpers:

    @staticmethod
    def create_bundle(
        transactions: Sequence[TransactionCall],
        block_overrides: Optional[BlockOverrides] = None,
    ) -> Bundle:
        return Bundle(transactions=list(transactions), block_overrides=block_overrides)

    @staticmethod
    def create_bundles(transaction_groups: Sequence[Sequence[TransactionCall]]) -> List[Bundle]:
        return [Bundle(transactions=list(group)) for group in transaction_groups]

    @staticmethod
    def single_transaction(transaction: TransactionCall) -> Bundle:
        return Bundle(transactions=[transaction])


class StateContextHelpers:

    @staticmethod
    def latest() -> StateContext:
        return StateContext()

    @staticmethod
    def at_block(block: Quantity) -> StateContext:
        return StateContext(block=to_hex(block) if isinstance(block, int) else block)

    @staticmethod
    def at_block_and_tx(block: Quantity, tx_index: int) -> StateContext:
        return StateContext(
            block=to_hex(block) if isinstance(block, int) else block,
            tx_index=TransactionIndex(index=tx_index),
        )


class TraceConfigPresets:
    """Ready-made tracer selections."""

    @staticmethod
    def all_tracers() -> TraceConfig:
        return TraceConfig(
            call_tracer=CallTracerConfig(),
            prestate_tracer=PrestateTracerConfig(diff_mode=True),
            struct_logger=StructLoggerConfig(),
            four_byte_tracer=True,
        )

    @staticmethod
    def basic_call_trace() -> TraceConfig:
        return TraceConfig()

    @staticmethod
    def state_analysis() -> TraceConfig:
        return TraceConfig(
            call_tracer=CallTracerConfig(with_logs=False),
            prestate_tracer=PrestateTracerConfig(diff_mode=True),
        )

    @staticmethod
    def detailed_execution() -> TraceConfig:
        return TraceConfig(
            call_tracer=CallTracerConfig(),
            struct_logger=StructLoggerConfig(clean_struct_logs=False, disable_memory=False),
        )

    @staticmethod
    def function_analysis() -> TraceConfig:
        return TraceConfig(
            call_tracer=CallTracerConfig(with_logs=False),
            four_byte_tracer=True,
        )


class AccessListHelpers:

    @staticmethod
    def merge(*access_lists: Sequence[AccessListItem]) -> List[AccessListItem]:
        """Union of several access lists, grouped by address with unique slots."""
        merged: Dict[str, List[str]] = {}
        addresses: Dict[str, str] = {}
        for access_list in access_lists:
            for item in access_list:
                key = item.address.lower()
                addresses.setdefault(key, item.address)
                slots = merged.setdefault(key, [])
                for slot in item.storage_keys:
                    if slot not in slots:
                        slots.append(slot)
        return [
            AccessListItem(address=addresses[key], storage_keys=slots)
            for key, slots in merged.items()
        ]

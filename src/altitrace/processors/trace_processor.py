"""Derived accessors over tracer responses."""
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, List, Optional

from ..core.validation import hex_to_int
from ..models.trace import LogEntry, PrestateAccount, PrestateDiff, TracerResponse
from .call_tree import CallTreeStats


@dataclass(frozen=True)
class StorageSlotAccess:
    """A storage slot touched during execution.

    ``address`` is None when the slot came from struct logs, which do not
    record the executing contract.
    """
    address: Optional[str]
    slot: str


class ExtendedTracerResponse:
    """
    Tracer response with call-tree analysis.

    The call tree is walked once per wrapper, on first use; every aggregate
    accessor reads from that single pass.
    """

    def __init__(self, response: TracerResponse):
        self.raw = response

    def __getattr__(self, name: str) -> Any:
        if name == "raw":
            raise AttributeError(name)
        return getattr(self.raw, name)

    @cached_property
    def call_tree_stats(self) -> CallTreeStats:
        root = self.raw.call_tracer.root_call if self.raw.call_tracer else None
        return CallTreeStats.from_root(root)

    def is_success(self) -> bool:
        if self.raw.receipt is not None:
            return self.raw.receipt.status
        if self.raw.call_tracer is not None:
            return not self.raw.call_tracer.root_call.reverted
        if self.raw.struct_logger is not None:
            return self.raw.struct_logger.error is None
        return True

    def is_failed(self) -> bool:
        return not self.is_success()

    def get_total_gas_used(self) -> int:
        """Gas used by the whole transaction.

        The root frame's ``gas_used`` already includes every nested call, so
        frames are never summed.
        """
        if self.raw.receipt is not None:
            return hex_to_int(self.raw.receipt.gas_used)
        if self.raw.call_tracer is not None:
            return hex_to_int(self.raw.call_tracer.root_call.gas_used)
        if self.raw.struct_logger is not None:
            return self.raw.struct_logger.total_gas
        return 0

    def get_errors(self) -> List[str]:
        errors = list(self.call_tree_stats.errors)
        if self.raw.struct_logger is not None and self.raw.struct_logger.error:
            errors.append(self.raw.struct_logger.error)
        return errors

    def get_all_logs(self) -> List[LogEntry]:
        return list(self.call_tree_stats.logs)

    def get_call_count(self) -> int:
        """Number of frames in the call tree, root included."""
        return self.call_tree_stats.call_count

    def get_max_depth(self) -> int:
        """Deepest nesting level reached; the root frame is depth 0."""
        return self.call_tree_stats.max_depth

    def get_accessed_accounts(self) -> List[str]:
        """Lower-cased addresses from call frames and prestate, first-seen order."""
        accounts = list(self.call_tree_stats.accounts)
        seen = set(accounts)
        for address in self._prestate_accounts():
            key = address.lower()
            if key not in seen:
                seen.add(key)
                accounts.append(key)
        return accounts

    def get_accessed_storage_slots(self) -> List[StorageSlotAccess]:
        slots: List[StorageSlotAccess] = []
        seen = set()

        def add(address: Optional[str], slot: str) -> None:
            access = StorageSlotAccess(address=address.lower() if address else None, slot=slot)
            if access not in seen:
                seen.add(access)
                slots.append(access)

        for address, account in self._prestate_accounts().items():
            for slot in account.storage:
                add(address, slot)

        if self.raw.struct_logger is not None:
            for log in self.raw.struct_logger.struct_logs or []:
                for slot in (log.storage or {}):
                    add(None, slot)

        return slots

    def get_function_signatures(self) -> List[str]:
        """Unique 4-byte selectors seen during execution."""
        four_byte = self.raw.four_byte_tracer
        if four_byte is not None and four_byte.identifiers:
            selectors = []
            for identifier in four_byte.identifiers:
                # identifiers may be keyed "selector-calldatasize"
                selector = identifier.split("-", 1)[0].lower()
                if selector not in selectors:
                    selectors.append(selector)
            return selectors
        return list(self.call_tree_stats.selectors)

    def _prestate_accounts(self) -> Dict[str, PrestateAccount]:
        prestate = self.raw.prestate_tracer
        if prestate is None:
            return {}
        if isinstance(prestate, PrestateDiff):
            merged: Dict[str, PrestateAccount] = {}
            for section in (prestate.pre, prestate.post):
                for address, account in section.items():
                    existing = merged.get(address)
                    if existing is None:
                        merged[address] = account
                    else:
                        storage = dict(existing.storage)
                        storage.update(account.storage)
                        merged[address] = existing.model_copy(update={"storage": storage})
            return merged
        return prestate

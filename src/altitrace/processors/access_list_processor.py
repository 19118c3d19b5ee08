"""Derived accessors over generated access lists."""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.validation import hex_to_int
from ..models.access_list import AccessListResponse


@dataclass
class AccessListSummary:
    account_count: int
    storage_slot_count: int
    gas_used: int
    accounts: Dict[str, List[str]] = field(default_factory=dict)


class ExtendedAccessListResponse:
    """Access-list response with lookup helpers. Addresses compare case-insensitively."""

    def __init__(self, response: AccessListResponse):
        self.raw = response
        self._by_address = self._group_by_address(response)

    def __getattr__(self, name: str) -> Any:
        if name in ("raw", "_by_address"):
            raise AttributeError(name)
        return getattr(self.raw, name)

    def is_success(self) -> bool:
        return self.raw.error is None

    def is_failed(self) -> bool:
        return self.raw.error is not None

    def get_total_gas_used(self) -> int:
        return hex_to_int(self.raw.gas_used)

    def get_account_count(self) -> int:
        return len(self._by_address)

    def get_storage_slot_count(self) -> int:
        return sum(len(slots) for slots in self._by_address.values())

    def has_account(self, address: str) -> bool:
        return address.lower() in self._by_address

    def get_account_storage_slots(self, address: str) -> List[str]:
        return list(self._by_address.get(address.lower(), []))

    def get_access_list_summary(self) -> AccessListSummary:
        return AccessListSummary(
            account_count=self.get_account_count(),
            storage_slot_count=self.get_storage_slot_count(),
            gas_used=self.get_total_gas_used(),
            accounts={address: list(slots) for address, slots in self._by_address.items()},
        )

    @staticmethod
    def _group_by_address(response: AccessListResponse) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for item in response.access_list:
            slots = grouped.setdefault(item.address.lower(), [])
            for key in item.storage_keys:
                if key not in slots:
                    slots.append(key)
        return grouped

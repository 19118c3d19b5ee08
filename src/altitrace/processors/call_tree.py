"""Iterative traversal and aggregate statistics over nested call frames."""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Tuple

from ..models.trace import CallFrame, LogEntry

SELECTOR_HEX_LENGTH = 10  # "0x" + 4 bytes


def iter_frames(root: Optional[CallFrame]) -> Iterator[Tuple[CallFrame, int]]:
    """Yield ``(frame, depth)`` in pre-order using an explicit stack.

    The root has depth 0. Children are visited in call order.
    """
    if root is None:
        return

    stack: List[Tuple[CallFrame, int]] = [(root, 0)]
    while stack:
        frame, depth = stack.pop()
        yield frame, depth
        for child in reversed(frame.calls):
            stack.append((child, depth + 1))


@dataclass
class CallTreeStats:
    """Everything derived from a single walk of the call tree."""
    call_count: int = 0
    max_depth: int = 0
    accounts: List[str] = field(default_factory=list)
    selectors: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    logs: List[LogEntry] = field(default_factory=list)

    @classmethod
    def from_root(cls, root: Optional[CallFrame]) -> "CallTreeStats":
        stats = cls()
        seen_accounts: Set[str] = set()
        seen_selectors: Set[str] = set()

        for frame, depth in iter_frames(root):
            stats.call_count += 1
            stats.max_depth = max(stats.max_depth, depth)

            for address in (frame.from_, frame.to):
                if address:
                    key = address.lower()
                    if key not in seen_accounts:
                        seen_accounts.add(key)
                        stats.accounts.append(key)

            if len(frame.input) >= SELECTOR_HEX_LENGTH:
                selector = frame.input[:SELECTOR_HEX_LENGTH].lower()
                if selector not in seen_selectors:
                    seen_selectors.add(selector)
                    stats.selectors.append(selector)

            if frame.error:
                stats.errors.append(frame.error)
            if frame.revert_reason:
                stats.errors.append(frame.revert_reason)

            stats.logs.extend(frame.logs)

        return stats

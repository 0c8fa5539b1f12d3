"""
In-memory log store.

Holds raw message buffers and an optional row filter. The filter is
evaluated once per ``set_filter`` call so filtered lookups stay O(1).
"""

import logging
from typing import Callable, Iterable, List, Optional

from .interfaces import LogStore

logger = logging.getLogger(__name__)


class InMemoryLogStore(LogStore):
    """LogStore over a list of raw message buffers."""

    def __init__(self, messages: Optional[Iterable[bytes]] = None):
        self.messages: List[bytes] = list(messages or [])
        self.filter_positions: List[int] = list(range(len(self.messages)))
        self._predicate: Optional[Callable[[bytes], bool]] = None

    def append(self, data: bytes) -> None:
        self.messages.append(data)
        if self._predicate is None or self._predicate(data):
            self.filter_positions.append(len(self.messages) - 1)

    def set_filter(self, predicate: Optional[Callable[[bytes], bool]]) -> None:
        """Apply a filter predicate; ``None`` clears the filter."""
        self._predicate = predicate
        if predicate is None:
            self.filter_positions = list(range(len(self.messages)))
        else:
            self.filter_positions = [
                index for index, data in enumerate(self.messages) if predicate(data)
            ]
        logger.debug(f"Filter matches {len(self.filter_positions)} of {len(self.messages)} messages")

    def total_count(self) -> int:
        return len(self.messages)

    def filtered_count(self) -> int:
        return len(self.filter_positions)

    def message(self, index: int) -> bytes:
        if not 0 <= index < len(self.messages):
            return b""
        return self.messages[index]

    def filtered_message(self, index: int) -> bytes:
        return self.message(self.filtered_position(index))

    def filtered_position(self, row: int) -> int:
        if not 0 <= row < len(self.filter_positions):
            return -1
        return self.filter_positions[row]

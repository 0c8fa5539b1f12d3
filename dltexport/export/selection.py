"""
Selection handling for DLT export runs.

Maps the sequential export position of a run onto the messages of the
log store for the three selection scopes:

- ``all``: every message, position ``i`` is absolute index ``i``.
- ``filtered``: messages passing the store filter, position ``i`` is the
  ``i``-th filtered message.
- ``selected``: rows picked in the filtered view, position ``i`` is the
  ``i``-th selected row resolved through the filter.
"""

import logging
from typing import List

from .models import ExportContext, ExportSelection

logger = logging.getLogger(__name__)


class SelectionStrategy:
    """Index translation and message retrieval for one export run."""

    def __init__(self, context: ExportContext):
        self.context = context
        self.scope = context.selection
        self.selected_rows: List[int] = []
        self._prepared = False

    @property
    def store(self):
        return self.context.store

    def prepare(self) -> None:
        """Normalize the selected rows once, before any message is read."""
        if self._prepared:
            return

        if self.scope == ExportSelection.SELECTED:
            self.selected_rows = sorted(set(self.context.selected_rows))
            logger.debug(f"Normalized selection to {len(self.selected_rows)} rows")

        self._prepared = True

    def size(self) -> int:
        """Number of messages in the selection, -1 for an unknown scope."""
        self._ensure_prepared()

        if self.scope == ExportSelection.ALL:
            return self.store.total_count()
        elif self.scope == ExportSelection.FILTERED:
            return self.store.filtered_count()
        elif self.scope == ExportSelection.SELECTED:
            return len(self.selected_rows)
        else:
            return -1

    def index(self, num: int) -> int:
        """Absolute store index of export position ``num``, -1 if not representable."""
        self._ensure_prepared()

        if self.scope == ExportSelection.ALL:
            return num
        elif self.scope == ExportSelection.FILTERED:
            return self.store.filtered_position(num)
        elif self.scope == ExportSelection.SELECTED:
            if not 0 <= num < len(self.selected_rows):
                return -1
            return self.store.filtered_position(self.selected_rows[num])
        else:
            return -1

    def message(self, num: int) -> bytes:
        """Raw bytes of export position ``num``, empty if unavailable."""
        self._ensure_prepared()

        if self.scope == ExportSelection.ALL:
            return self.store.message(num)
        elif self.scope == ExportSelection.FILTERED:
            return self.store.filtered_message(num)
        elif self.scope == ExportSelection.SELECTED:
            if not 0 <= num < len(self.selected_rows):
                return b""
            return self.store.filtered_message(self.selected_rows[num])
        else:
            return b""

    def _ensure_prepared(self):
        if not self._prepared:
            raise RuntimeError("SelectionStrategy.prepare() must be called before use")

"""
Unit tests for export selection handling.

Covers index translation and message retrieval for the all, filtered
and selected scopes.
"""

import pytest
from unittest.mock import Mock

from dltexport.export.interfaces import LogStore
from dltexport.export.models import ExportContext, ExportFormat, ExportSelection
from dltexport.export.selection import SelectionStrategy
from dltexport.export.store import InMemoryLogStore


def _context(store, selection, rows=(), **kwargs):
    return ExportContext(
        store=store,
        decoder=Mock(),
        parser=Mock(),
        reporter=Mock(),
        format=ExportFormat.ASCII,
        selection=selection,
        selected_rows=rows,
        sink=Mock(),
        **kwargs
    )


class TestSelectionStrategy:
    """Unit tests for SelectionStrategy."""

    def setup_method(self):
        """Set up a store where only odd messages pass the filter."""
        self.store = InMemoryLogStore([f"message {i}".encode() for i in range(6)])
        self.store.set_filter(lambda data: int(data.split()[1]) % 2 == 1)

    def test_all_scope_is_identity(self):
        strategy = SelectionStrategy(_context(self.store, ExportSelection.ALL))
        strategy.prepare()

        assert strategy.size() == 6
        for i in range(6):
            assert strategy.index(i) == i
            assert strategy.message(i) == f"message {i}".encode()

    def test_filtered_scope_uses_filter_positions(self):
        strategy = SelectionStrategy(_context(self.store, ExportSelection.FILTERED))
        strategy.prepare()

        assert strategy.size() == 3
        assert [strategy.index(i) for i in range(3)] == [1, 3, 5]
        assert strategy.message(2) == b"message 5"

    def test_selected_scope_sorts_and_resolves_rows(self):
        strategy = SelectionStrategy(_context(self.store, ExportSelection.SELECTED, rows=[2, 0, 2]))
        strategy.prepare()

        assert strategy.selected_rows == [0, 2]
        assert strategy.size() == 2
        assert strategy.index(0) == 1
        assert strategy.index(1) == 5
        assert strategy.message(1) == b"message 5"

    def test_selected_scope_out_of_range(self):
        strategy = SelectionStrategy(_context(self.store, ExportSelection.SELECTED, rows=[0, 7]))
        strategy.prepare()

        # Row 7 does not exist in the filtered view
        assert strategy.index(1) == -1
        assert strategy.message(1) == b""
        assert strategy.index(5) == -1
        assert strategy.message(5) == b""

    def test_filtered_scope_out_of_range(self):
        strategy = SelectionStrategy(_context(self.store, ExportSelection.FILTERED))
        strategy.prepare()

        assert strategy.index(10) == -1
        assert strategy.message(10) == b""

    def test_unknown_scope(self):
        strategy = SelectionStrategy(_context(self.store, "bookmarked"))
        strategy.prepare()

        assert strategy.size() == -1
        assert strategy.index(0) == -1
        assert strategy.message(0) == b""

    def test_use_before_prepare_raises(self):
        strategy = SelectionStrategy(_context(self.store, ExportSelection.ALL))

        with pytest.raises(RuntimeError):
            strategy.size()
        with pytest.raises(RuntimeError):
            strategy.index(0)

    def test_prepare_runs_once(self):
        context = _context(self.store, ExportSelection.SELECTED, rows=[1, 0])
        strategy = SelectionStrategy(context)
        strategy.prepare()
        strategy.selected_rows.append(9)
        strategy.prepare()

        assert strategy.selected_rows == [0, 1, 9]

    def test_store_calls_follow_scope(self):
        store = Mock(spec=LogStore)
        store.filtered_count.return_value = 4
        store.filtered_position.return_value = 11
        store.filtered_message.return_value = b"x"

        strategy = SelectionStrategy(_context(store, ExportSelection.SELECTED, rows=[3, 1]))
        strategy.prepare()

        assert strategy.index(0) == 11
        store.filtered_position.assert_called_with(1)
        assert strategy.message(1) == b"x"
        store.filtered_message.assert_called_with(3)
        store.message.assert_not_called()


class TestInMemoryLogStore:
    """Unit tests for the in-memory store."""

    def test_filter_and_append(self):
        store = InMemoryLogStore([b"a1", b"b2"])
        store.set_filter(lambda data: data.startswith(b"a"))

        store.append(b"a3")
        store.append(b"b4")

        assert store.total_count() == 4
        assert store.filtered_count() == 2
        assert store.filtered_position(1) == 2
        assert store.filtered_message(1) == b"a3"

    def test_clear_filter(self):
        store = InMemoryLogStore([b"a1", b"b2"])
        store.set_filter(lambda data: False)
        assert store.filtered_count() == 0

        store.set_filter(None)
        assert store.filtered_count() == 2
        assert store.filtered_position(-1) == -1

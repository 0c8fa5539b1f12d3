"""
Property-based tests for the DLT export pipeline.

Tests universal properties of selection, rendering and run tallies.
"""

import csv
import io

from hypothesis import given, strategies as st, settings
from hypothesis.strategies import composite

from conftest import FakeDecoder, FakeParser, make_raw
from dltexport.export.driver import ExportDriver
from dltexport.export.formats import format_time, format_timestamp, render_csv_row
from dltexport.export.models import ExportContext, ExportFormat, ExportSelection, ExportState
from dltexport.export.progress import SilentProgressObserver
from dltexport.export.selection import SelectionStrategy
from dltexport.export.sinks import BytesSink, MemoryClipboard
from dltexport.export.store import InMemoryLogStore
from dltexport.system.error_handler import LoggingErrorReporter


# Test data generators
@composite
def filtered_store_strategy(draw):
    """Generate a store of valid/empty messages with a random filter."""
    size = draw(st.integers(min_value=0, max_value=30))
    valid = draw(st.lists(st.booleans(), min_size=size, max_size=size))
    keep = draw(st.lists(st.booleans(), min_size=size, max_size=size))

    store = InMemoryLogStore([
        make_raw(i, f"payload {i}") if valid[i] else b"" for i in range(size)
    ])
    kept = {i for i in range(size) if keep[i]}
    store.filter_positions = sorted(kept)
    return store


def _context(store, selection, rows=(), export_format=ExportFormat.ASCII):
    return ExportContext(
        store=store,
        decoder=FakeDecoder(),
        parser=FakeParser(),
        reporter=LoggingErrorReporter(),
        format=export_format,
        selection=selection,
        selected_rows=rows,
        silent_mode=True,
        sink=BytesSink(),
        clipboard=MemoryClipboard()
    )


class TestSelectionProperties:
    """Property-based tests for index translation."""

    @given(filtered_store_strategy())
    @settings(max_examples=50, deadline=None)
    def test_all_scope_identity_property(self, store):
        strategy = SelectionStrategy(_context(store, ExportSelection.ALL))
        strategy.prepare()

        assert strategy.size() == store.total_count()
        for i in range(strategy.size()):
            assert strategy.index(i) == i

    @given(filtered_store_strategy())
    @settings(max_examples=50, deadline=None)
    def test_filtered_scope_property(self, store):
        strategy = SelectionStrategy(_context(store, ExportSelection.FILTERED))
        strategy.prepare()

        assert strategy.size() == store.filtered_count()
        for i in range(strategy.size()):
            assert strategy.index(i) == store.filtered_position(i)

    @given(filtered_store_strategy(), st.lists(st.integers(min_value=0, max_value=40), max_size=40))
    @settings(max_examples=50, deadline=None)
    def test_selected_scope_property(self, store, rows):
        strategy = SelectionStrategy(_context(store, ExportSelection.SELECTED, rows))
        strategy.prepare()

        selected = strategy.selected_rows
        assert all(a < b for a, b in zip(selected, selected[1:]))
        assert set(selected) == set(rows)
        for i in range(strategy.size()):
            assert strategy.index(i) == store.filtered_position(selected[i])


class TestRenderingProperties:
    """Property-based tests for CSV and time rendering."""

    @given(st.lists(st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=255)), min_size=1, max_size=13))
    @settings(max_examples=100, deadline=None)
    def test_csv_quoting_roundtrip_property(self, values):
        line = render_csv_row(values)

        for value in values:
            assert '"' + value.replace('"', '""') + '"' in line
        assert line.startswith('"') and line.endswith('"\n')
        assert next(csv.reader(io.StringIO(line))) == values

    @given(st.integers(min_value=0, max_value=2**32 - 1))
    def test_timestamp_property(self, ticks):
        seconds, fraction = format_timestamp(ticks).split(".")

        assert int(seconds) == ticks // 10000
        assert len(fraction) == 4
        assert int(fraction) == ticks % 10000

    @given(st.integers(min_value=0, max_value=999999))
    def test_time_property(self, microseconds):
        rendered = format_time("2024/01/02 03:04:05", microseconds)

        assert rendered[:-7] == "2024/01/02 03:04:05"
        assert len(rendered.rsplit(".", 1)[1]) == 6
        assert int(rendered.rsplit(".", 1)[1]) == microseconds


class TestDriverProperties:
    """Property-based tests for run tallies."""

    @given(filtered_store_strategy(), st.sampled_from(list(ExportSelection)),
           st.sampled_from(list(ExportFormat)), st.lists(st.integers(min_value=0, max_value=40)))
    @settings(max_examples=100, deadline=None)
    def test_tallies_cover_selection_property(self, store, selection, export_format, rows):
        context = _context(store, selection, rows, export_format)
        result = ExportDriver(context, observer=SilentProgressObserver()).run()

        assert result.state == ExportState.FINISHED
        assert result.exported_records + result.read_errors + result.export_errors == result.total_records
        assert result.has_errors == (result.summary is not None)
        assert (context.reporter.last_summary is not None) == result.has_errors

"""
Export driver for DLT Export.

Runs one export: prepares the selection, opens the format handler, drives
read -> decode -> export for every message of the selection and finishes
the destination. Per-message failures are counted and the run continues;
only open/prepare failures stop a run before the first message.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from dltexport.system.error_handler import ErrorCategory
from dltexport.system.logging_config import get_logger

from .formats import FormatHandler, create_format_handler
from .models import (ExportContext, ExportCounters, ExportRecord, ExportResult,
                     ExportSelection, ExportState)
from .progress import ProgressObserver, create_progress_observer
from .selection import SelectionStrategy


class ExportDriver:
    """Drives a single export run through its states."""

    def __init__(self, context: ExportContext, observer: Optional[ProgressObserver] = None,
                 export_id: Optional[str] = None):
        self.context = context
        self.export_id = export_id or str(uuid4())
        self.selection = SelectionStrategy(context)
        self.handler: FormatHandler = create_format_handler(context, self.selection)
        self.observer = observer or create_progress_observer(context.silent_mode)
        self.counters = ExportCounters()
        self.state = ExportState.IDLE
        self.cancelled = False
        self.logger = get_logger(__name__, export_id=self.export_id)

    def start(self) -> bool:
        """Prepare the selection and open the destination."""
        self.state = ExportState.STARTED
        self.selection.prepare()

        if self.selection.size() < 0:
            self.context.reporter.report("Invalid export selection.", ErrorCategory.SELECTION)
            return False

        if not self.handler.open():
            return False

        if not self.handler.prepare():
            # Release the destination opened above
            self._finish_handler()
            return False

        return True

    def run(self) -> ExportResult:
        """Export every message of the selection and return the run's result."""
        if self.state != ExportState.IDLE:
            raise RuntimeError(f"Export {self.export_id} already ran")

        if not self.start():
            self.logger.error("DLT export start failed")
            self.counters.lifecycle_errors += 1
            self.state = ExportState.ABORTED
            return self._build_result()

        size = self.selection.size()
        self.counters.total = size
        self.state = ExportState.RUNNING

        self.logger.info(
            f"Start DLT export of {size} messages as {self.context.format.value} "
            f"(silent mode {self.context.silent_mode})"
        )

        self.observer.start(size)

        for num in range(size):
            if self.observer.cancelled:
                self.cancelled = True
                self.logger.info(f"DLT export cancelled after {num} of {size} messages")
                break

            self.observer.update(num)
            self._export_one(num)

        self.observer.done()

        if not self._finish_handler():
            self.counters.lifecycle_errors += 1

        self.state = ExportState.ABORTED if self.counters.lifecycle_errors else ExportState.FINISHED

        summary = None
        if self.counters.has_errors:
            summary = self.counters.summary()
            self.logger.warning(
                f"DLT export finished with errors ({self.counters.success_rate:.1f}% exported)"
            )
            self.context.reporter.report_summary(summary)
        else:
            self.logger.info(f"DLT export done for {self.counters.exported} messages")

        return self._build_result(summary)

    def _export_one(self, num: int) -> None:
        try:
            record: Optional[ExportRecord] = self.handler.read_message(num)
        except Exception as e:
            self.logger.debug(f"DLT export read raised on message {num}: {e}")
            record = None

        if record is None:
            self.logger.debug(f"DLT export read failed on message {num}")
            self.counters.read_errors += 1
            return

        try:
            self.handler.decode_message(record)
            exported = self.handler.export_message(num, record)
        except Exception as e:
            self.logger.debug(f"DLT export raised on message {num}: {e}")
            exported = False

        if exported:
            self.counters.exported += 1
        else:
            self.logger.debug(f"DLT export failed on message {num}")
            self.counters.export_errors += 1

    def _finish_handler(self) -> bool:
        try:
            return self.handler.finish()
        except Exception as e:
            self.logger.error(f"DLT export finish failed: {e}")
            return False

    def _build_result(self, summary: Optional[str] = None) -> ExportResult:
        return ExportResult(
            export_id=self.export_id,
            state=self.state,
            format=self.context.format,
            selection=self.context.selection if isinstance(self.context.selection, ExportSelection) else None,
            total_records=self.counters.total,
            exported_records=self.counters.exported,
            read_errors=self.counters.read_errors,
            export_errors=self.counters.export_errors,
            lifecycle_errors=self.counters.lifecycle_errors,
            cancelled=self.cancelled,
            summary=summary,
            completed_at=datetime.now()
        )

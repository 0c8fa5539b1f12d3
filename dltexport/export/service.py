"""
Export service for DLT Export.

Provides message export from a log store in multiple formats (DLT, decoded
DLT, ASCII, UTF-8, CSV, clipboard).
"""

import logging
import os
from typing import Dict, List, Optional
from uuid import uuid4

from dltexport.config.settings import Settings, settings as default_settings
from dltexport.system.error_handler import ErrorReporter, LoggingErrorReporter

from .driver import ExportDriver
from .interfaces import ClipboardTarget, ExportSink, LogStore, MessageDecoder, MessageParser
from .models import ExportContext, ExportFormat, ExportRequest, ExportResult
from .progress import ProgressObserver, create_progress_observer
from .sinks import FileSink

logger = logging.getLogger(__name__)


class ExportService:
    """Service for exporting log messages in multiple formats."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize export service."""
        self.settings = settings or default_settings

        # In-memory registry of finished export runs
        self.export_jobs: Dict[str, ExportResult] = {}

    def create_request(self, **overrides) -> ExportRequest:
        """Create a request using the configured default format."""
        overrides.setdefault("format", self.settings.export.default_format)
        return ExportRequest(**overrides)

    def resolve_output_path(self, output_path: str) -> str:
        """Place relative output paths under the configured output directory."""
        output_dir = self.settings.export.output_dir
        if output_dir and not os.path.isabs(output_path):
            return os.path.join(output_dir, output_path)
        return output_path

    def build_context(self, request: ExportRequest, store: LogStore, decoder: MessageDecoder,
                      parser: MessageParser, sink: Optional[ExportSink] = None,
                      clipboard: Optional[ClipboardTarget] = None,
                      reporter: Optional[ErrorReporter] = None) -> ExportContext:
        """Build the run context for a request, resolving defaults from settings."""
        if sink is None and request.format != ExportFormat.CLIPBOARD:
            if not request.output_path:
                raise ValueError(f"output_path is required for {request.format.value} export")
            sink = FileSink(self.resolve_output_path(request.output_path))

        silent_mode = request.silent_mode
        if silent_mode is None:
            silent_mode = self.settings.export.silent_mode

        return ExportContext(
            store=store,
            decoder=decoder,
            parser=parser,
            reporter=reporter or LoggingErrorReporter(),
            format=request.format,
            selection=request.selection,
            selected_rows=request.selected_rows or (),
            silent_mode=silent_mode,
            sink=sink,
            clipboard=clipboard
        )

    def export_messages(self, request: ExportRequest, store: LogStore, decoder: MessageDecoder,
                        parser: MessageParser, *, sink: Optional[ExportSink] = None,
                        clipboard: Optional[ClipboardTarget] = None,
                        reporter: Optional[ErrorReporter] = None,
                        observer: Optional[ProgressObserver] = None) -> ExportResult:
        """Run an export and register its result."""
        context = self.build_context(request, store, decoder, parser, sink, clipboard, reporter)

        if observer is None:
            observer = create_progress_observer(
                context.silent_mode, self.settings.export.progress_min_interval
            )

        export_id = str(uuid4())
        logger.info(f"Started export job {export_id} with format {request.format.value}")

        driver = ExportDriver(context, observer=observer, export_id=export_id)
        result = driver.run()

        if isinstance(context.sink, FileSink):
            result.file_path = str(context.sink.path)

        self.export_jobs[export_id] = result
        logger.info(
            f"Export {export_id} {result.state.value}: "
            f"{result.exported_records}/{result.total_records} messages"
        )

        return result

    def get_export_status(self, export_id: str) -> Optional[ExportResult]:
        """Get export job status."""
        return self.export_jobs.get(export_id)

    def list_exports(self) -> List[ExportResult]:
        """List all export jobs."""
        return list(self.export_jobs.values())

    def delete_export(self, export_id: str) -> bool:
        """Delete export job and associated file."""
        if export_id not in self.export_jobs:
            return False

        result = self.export_jobs[export_id]

        # Delete file if exists
        if result.file_path and os.path.exists(result.file_path):
            try:
                os.remove(result.file_path)
                logger.info(f"Deleted export file: {result.file_path}")
            except OSError as e:
                logger.error(f"Failed to delete export file: {e}")

        # Remove from jobs
        del self.export_jobs[export_id]
        return True

"""
Format handlers for DLT export.

Each export format owns the lifecycle of its destination:
open -> prepare -> (read -> decode -> export) per message -> finish.
"""

import csv
import io
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from dltexport.system.error_handler import ErrorCategory

from .interfaces import LogMessage, SinkMode
from .models import CSV_FIELD_NAMES, ExportContext, ExportFormat, ExportRecord
from .selection import SelectionStrategy

logger = logging.getLogger(__name__)


def simplify_text(text: str) -> str:
    """Trim and collapse every whitespace run into one space."""
    return " ".join(text.split())


def format_text_line(index: int, message: LogMessage) -> str:
    """Render ``"<index> <header> <payload>\\n"`` for the text formats."""
    return f"{index} {message.header_text()} {simplify_text(message.payload_text())}\n"


def format_time(time_string: str, microseconds: int) -> str:
    return f"{time_string}.{microseconds:06d}"


def format_timestamp(timestamp: int) -> str:
    """Render timestamp ticks (0.1 ms) as ``seconds.ticks``."""
    return f"{timestamp // 10000}.{timestamp % 10000:04d}"


def csv_row_values(index: int, message: LogMessage) -> List[str]:
    """Column values of one CSV row, in CSV_FIELD_NAMES order."""
    return [
        str(index),
        format_time(message.time_string, message.microseconds),
        format_timestamp(message.timestamp),
        str(message.message_counter),
        str(message.ecu_id),
        str(message.app_id),
        str(message.context_id),
        str(message.session_id),
        str(message.type_string),
        str(message.subtype_string),
        str(message.mode_string),
        str(message.number_of_arguments),
        simplify_text(message.payload_text()),
    ]


def render_csv_row(values) -> str:
    """Quote every field, doubling embedded quotes."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(values)
    return buf.getvalue()


class FormatHandler(ABC):
    """Lifecycle of one export format."""

    @abstractmethod
    def open(self) -> bool:
        pass

    @abstractmethod
    def prepare(self) -> bool:
        pass

    @abstractmethod
    def read_message(self, num: int) -> Optional[ExportRecord]:
        pass

    @abstractmethod
    def decode_message(self, record: ExportRecord) -> None:
        pass

    @abstractmethod
    def export_message(self, num: int, record: ExportRecord) -> bool:
        pass

    @abstractmethod
    def finish(self) -> bool:
        pass


class BaseFormatHandler(FormatHandler):
    """Behaviour shared by all formats."""

    sink_mode = SinkMode.BINARY

    def __init__(self, context: ExportContext, selection: SelectionStrategy):
        self.context = context
        self.selection = selection

    @property
    def sink(self):
        return self.context.sink

    def open(self) -> bool:
        """Open the sink, reporting to the operator when that fails."""
        try:
            opened = self.sink.open(self.sink_mode)
        except OSError as e:
            logger.error(f"Failed to open export sink: {e}")
            opened = False

        if not opened:
            self.context.reporter.report("Cannot open the export file.", ErrorCategory.OPEN)
            return False

        return True

    def prepare(self) -> bool:
        return True

    def read_message(self, num: int) -> Optional[ExportRecord]:
        data = self.selection.message(num)
        if not data:
            return None

        try:
            message = self.context.parser.parse(data)
        except ValueError as e:
            logger.debug(f"Cannot parse message {num}: {e}")
            return None

        return ExportRecord(data=data, message=message)

    def decode_message(self, record: ExportRecord) -> None:
        self.context.decoder.decode(record.message, self.context.silent_mode)

    def finish(self) -> bool:
        if self.sink is None:
            return True

        try:
            self.sink.close()
        except OSError as e:
            logger.error(f"Failed to close export sink: {e}")
            return False

        return True

    def write(self, data: bytes) -> bool:
        try:
            self.sink.write(data)
        except OSError as e:
            logger.debug(f"Write to export sink failed: {e}")
            return False
        return True


class DltFormatHandler(BaseFormatHandler):
    """Writes the original message bytes unmodified."""

    def decode_message(self, record: ExportRecord) -> None:
        pass

    def export_message(self, num: int, record: ExportRecord) -> bool:
        return self.write(record.data)


class DltDecodedFormatHandler(DltFormatHandler):
    """Writes messages re-encoded with their decoded arguments."""

    def decode_message(self, record: ExportRecord) -> None:
        BaseFormatHandler.decode_message(self, record)
        message = record.message
        message.number_of_arguments = message.argument_count()
        record.data = message.serialize()


class BaseTextFormatHandler(BaseFormatHandler):
    sink_mode = SinkMode.TEXT


class PlainTextFormatHandler(BaseTextFormatHandler):
    """One ``<index> <header> <payload>`` line per message."""

    def export_message(self, num: int, record: ExportRecord) -> bool:
        index = self.selection.index(num)
        if index < 0:
            return False

        return self.write_text(format_text_line(index, record.message))

    @abstractmethod
    def write_text(self, text: str) -> bool:
        pass


class AsciiFormatHandler(PlainTextFormatHandler):

    def write_text(self, text: str) -> bool:
        return self.write(text.encode("latin-1", errors="replace"))


class Utf8FormatHandler(PlainTextFormatHandler):

    def write_text(self, text: str) -> bool:
        return self.write(text.encode("utf-8"))


class ClipboardFormatHandler(PlainTextFormatHandler):
    """Collects the text lines and publishes them to the clipboard at finish."""

    def __init__(self, context: ExportContext, selection: SelectionStrategy):
        super().__init__(context, selection)
        self.lines: List[str] = []

    def open(self) -> bool:
        self.lines = []
        return True

    def write_text(self, text: str) -> bool:
        self.lines.append(text)
        return True

    @property
    def text(self) -> str:
        return "".join(self.lines)

    def finish(self) -> bool:
        self.context.clipboard.set_text(self.text)
        logger.debug(f"Published {len(self.lines)} lines to the clipboard")
        return True


class CsvFormatHandler(BaseTextFormatHandler):
    """Comma separated values with a header row; every field is quoted."""

    def prepare(self) -> bool:
        # Write the first line of the CSV file
        if not self.write(render_csv_row(CSV_FIELD_NAMES).encode("latin-1")):
            self.context.reporter.report("Cannot write to export file.", ErrorCategory.PREPARE)
            return False
        return True

    def export_message(self, num: int, record: ExportRecord) -> bool:
        index = self.selection.index(num)
        if index < 0:
            return False

        line = render_csv_row(csv_row_values(index, record.message))
        return self.write(line.encode("latin-1", errors="replace"))


FORMAT_HANDLERS: Dict[ExportFormat, Type[BaseFormatHandler]] = {
    ExportFormat.DLT: DltFormatHandler,
    ExportFormat.DLT_DECODED: DltDecodedFormatHandler,
    ExportFormat.ASCII: AsciiFormatHandler,
    ExportFormat.UTF8: Utf8FormatHandler,
    ExportFormat.CLIPBOARD: ClipboardFormatHandler,
    ExportFormat.CSV: CsvFormatHandler,
}


def create_format_handler(context: ExportContext, selection: SelectionStrategy) -> BaseFormatHandler:
    """Create the handler for the context's export format."""
    handler_class = FORMAT_HANDLERS.get(context.format)
    if handler_class is None:
        raise ValueError(f"Unsupported export format: {context.format}")
    return handler_class(context, selection)

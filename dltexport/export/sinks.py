"""
Export destinations: files, in-memory buffers and the clipboard.
"""

import io
import logging
from pathlib import Path
from typing import List, Optional, Union

from .interfaces import ClipboardTarget, ExportSink, SinkMode

logger = logging.getLogger(__name__)


class FileSink(ExportSink):
    """Writes the export to a file, truncating any previous content."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._file: Optional[io.BufferedWriter] = None
        self.mode: Optional[SinkMode] = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self, mode: SinkMode) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Text output is written pre-encoded with "\n" line endings
            self._file = open(self.path, 'wb')
        except OSError as e:
            logger.error(f"Cannot open export file {self.path}: {e}")
            return False

        self.mode = mode
        return True

    def write(self, data: bytes) -> int:
        if self._file is None:
            raise OSError(f"Export file {self.path} is not open")
        return self._file.write(data)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class BytesSink(ExportSink):
    """Keeps the export in memory."""

    def __init__(self):
        self.buffer = io.BytesIO()
        self.mode: Optional[SinkMode] = None
        self.closed = False

    def open(self, mode: SinkMode) -> bool:
        self.buffer = io.BytesIO()
        self.mode = mode
        self.closed = False
        return True

    def write(self, data: bytes) -> int:
        if self.closed:
            raise OSError("Sink is closed")
        return self.buffer.write(data)

    def close(self) -> None:
        self.closed = True

    def getvalue(self) -> bytes:
        return self.buffer.getvalue()


class MemoryClipboard(ClipboardTarget):
    """Clipboard stand-in for headless runs; remembers every published text."""

    def __init__(self):
        self.history: List[str] = []

    def set_text(self, text: str) -> None:
        self.history.append(text)

    @property
    def text(self) -> str:
        return self.history[-1] if self.history else ""

"""
Collaborator contracts for the DLT export pipeline.

The export core only talks to the log store, the message parser/decoder,
the output sink and the clipboard through these interfaces.
"""

from abc import ABC, abstractmethod
from enum import Enum

from dltexport.system.error_handler import ErrorReporter


class SinkMode(str, Enum):
    """How a sink is opened."""
    BINARY = "binary"
    TEXT = "text"


class LogStore(ABC):
    """Indexed store of raw log messages with an active filter."""

    @abstractmethod
    def total_count(self) -> int:
        """Number of messages in the store."""
        pass

    @abstractmethod
    def filtered_count(self) -> int:
        """Number of messages passing the active filter."""
        pass

    @abstractmethod
    def message(self, index: int) -> bytes:
        """Raw message bytes by absolute index, empty if unavailable."""
        pass

    @abstractmethod
    def filtered_message(self, index: int) -> bytes:
        """Raw message bytes by filtered index, empty if unavailable."""
        pass

    @abstractmethod
    def filtered_position(self, row: int) -> int:
        """Absolute index of the filtered row, -1 if out of range."""
        pass


class LogMessage(ABC):
    """A parsed log message whose arguments can be decoded in place."""

    time_string: str
    microseconds: int
    timestamp: int
    message_counter: int
    ecu_id: str
    app_id: str
    context_id: str
    session_id: int
    type_string: str
    subtype_string: str
    mode_string: str
    number_of_arguments: int

    @abstractmethod
    def argument_count(self) -> int:
        """Number of arguments currently held (after decoding)."""
        pass

    @abstractmethod
    def header_text(self) -> str:
        pass

    @abstractmethod
    def payload_text(self) -> str:
        pass

    @abstractmethod
    def serialize(self) -> bytes:
        """Re-encode the message, including its storage header."""
        pass


class MessageParser(ABC):
    """Turns raw bytes into a LogMessage."""

    @abstractmethod
    def parse(self, data: bytes) -> LogMessage:
        """Parse a raw buffer; raises ValueError for a malformed buffer."""
        pass


class MessageDecoder(ABC):
    """Decoder/plugin facility expanding message payloads."""

    @abstractmethod
    def decode(self, message: LogMessage, silent_mode: bool) -> None:
        """Decode the message in place."""
        pass


class ExportSink(ABC):
    """Byte-oriented export destination."""

    @abstractmethod
    def open(self, mode: SinkMode) -> bool:
        pass

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write data; raises OSError when the write fails."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class ClipboardTarget(ABC):
    """Shared text target the clipboard export publishes to."""

    @abstractmethod
    def set_text(self, text: str) -> None:
        pass


__all__ = [
    "SinkMode",
    "LogStore",
    "LogMessage",
    "MessageParser",
    "MessageDecoder",
    "ExportSink",
    "ClipboardTarget",
    "ErrorReporter",
]

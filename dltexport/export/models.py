"""
Export data models for DLT Export.

Defines data structures for export runs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from dltexport.export.interfaces import (
    ClipboardTarget,
    ErrorReporter,
    ExportSink,
    LogMessage,
    LogStore,
    MessageDecoder,
    MessageParser,
)


class ExportFormat(str, Enum):
    """Supported export formats."""
    DLT = "dlt"
    ASCII = "ascii"
    CSV = "csv"
    CLIPBOARD = "clipboard"
    DLT_DECODED = "dlt_decoded"
    UTF8 = "utf8"


class ExportSelection(str, Enum):
    """Which subset of messages an export run targets."""
    ALL = "all"
    FILTERED = "filtered"
    SELECTED = "selected"


class ExportState(str, Enum):
    """Lifecycle state of an export run."""
    IDLE = "idle"
    STARTED = "started"
    RUNNING = "running"
    FINISHED = "finished"
    ABORTED = "aborted"


# CSV header columns, in row order
CSV_FIELD_NAMES = (
    "Index",
    "Time",
    "Timestamp",
    "Count",
    "Ecuid",
    "Apid",
    "Ctid",
    "SessionId",
    "Type",
    "Subtype",
    "Mode",
    "#Args",
    "Payload",
)


class ExportRequest(BaseModel):
    """Request model for a message export."""

    format: ExportFormat = Field(..., description="Export format")
    selection: ExportSelection = Field(ExportSelection.ALL, description="Selection scope")
    selected_rows: Optional[List[int]] = Field(None, description="Rows of the filtered view to export")
    silent_mode: Optional[bool] = Field(None, description="Run without interactive progress; defaults to settings")
    output_path: Optional[str] = Field(None, description="Destination file for file-based formats")

    @field_validator('selected_rows')
    @classmethod
    def validate_rows(cls, v):
        """Validate that rows are non-negative."""
        if v is not None:
            for row in v:
                if row < 0:
                    raise ValueError(f'Invalid row: {row}')
        return v

    @model_validator(mode='after')
    def validate_selection(self):
        if self.selection == ExportSelection.SELECTED and self.selected_rows is None:
            raise ValueError('selected_rows is required for the selected scope')
        return self


class ExportResult(BaseModel):
    """Result model for an export run."""

    export_id: str = Field(..., description="Unique export identifier")
    state: ExportState = Field(ExportState.IDLE, description="Export state")
    format: ExportFormat = Field(..., description="Export format")
    selection: Optional[ExportSelection] = Field(None, description="Selection scope")
    total_records: int = Field(0, description="Number of messages in the selection")
    exported_records: int = Field(0, description="Number of exported messages")
    read_errors: int = Field(0, description="Messages that could not be read")
    export_errors: int = Field(0, description="Messages that could not be written")
    lifecycle_errors: int = Field(0, description="Open/prepare/finish failures")
    cancelled: bool = Field(False, description="Whether the operator cancelled the run")
    summary: Optional[str] = Field(None, description="Error summary shown to the operator")
    file_path: Optional[str] = Field(None, description="Path to exported file")
    created_at: datetime = Field(default_factory=datetime.now, description="Export creation time")
    completed_at: Optional[datetime] = Field(None, description="Export completion time")

    @property
    def has_errors(self) -> bool:
        return bool(self.read_errors or self.export_errors or self.lifecycle_errors)


@dataclass
class ExportCounters:
    """Tallies of one export run."""
    total: int = 0
    exported: int = 0
    read_errors: int = 0
    export_errors: int = 0
    lifecycle_errors: int = 0

    @property
    def has_errors(self) -> bool:
        return self.read_errors > 0 or self.export_errors > 0 or self.lifecycle_errors > 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total <= 0:
            return 0.0
        return (self.exported / self.total) * 100

    def summary(self) -> str:
        return (
            f"Exported successful: {self.exported} / {self.total}\n\n"
            f"ReadErrors:{self.read_errors}\n"
            f"WriteErrors:{self.export_errors}\n"
            f"Start/Finish errors:{self.lifecycle_errors}"
        )


@dataclass
class ExportRecord:
    """One message travelling through the pipeline."""
    data: bytes
    message: LogMessage


@dataclass(frozen=True)
class ExportContext:
    """Configuration of a single export run."""
    store: LogStore
    decoder: MessageDecoder
    parser: MessageParser
    reporter: ErrorReporter
    format: ExportFormat
    selection: ExportSelection = ExportSelection.ALL
    selected_rows: Tuple[int, ...] = field(default_factory=tuple)
    silent_mode: bool = False
    sink: Optional[ExportSink] = None
    clipboard: Optional[ClipboardTarget] = None

    def __post_init__(self):
        # Callers may hand over any sequence of rows
        object.__setattr__(self, 'selected_rows', tuple(self.selected_rows or ()))
        self.validate()

    def validate(self) -> bool:
        """Validate the collaborators required by the chosen format."""
        if self.format == ExportFormat.CLIPBOARD:
            if self.clipboard is None:
                raise ValueError("clipboard target is required for clipboard export")
        elif self.sink is None:
            raise ValueError(f"sink is required for {self.format.value} export")
        return True

"""
Export module for DLT Export.

Provides bulk export of log messages in multiple formats.
"""

from .service import ExportService
from .driver import ExportDriver
from .models import (
    ExportContext,
    ExportFormat,
    ExportRequest,
    ExportResult,
    ExportSelection,
    ExportState,
)

__all__ = [
    "ExportService",
    "ExportDriver",
    "ExportContext",
    "ExportFormat",
    "ExportRequest",
    "ExportResult",
    "ExportSelection",
    "ExportState",
]

"""
Error Handling for DLT Export.

Classifies export errors and provides the operator error channel used
to surface fatal conditions and end-of-run summaries.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import List, Optional
from dataclasses import dataclass
from enum import Enum
from uuid import uuid4


logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories of an export run."""
    OPEN = "open"
    PREPARE = "prepare"
    SELECTION = "selection"
    READ = "read"
    EXPORT = "export"
    FINISH = "finish"


# Open/prepare/selection failures stop the run before any record is processed
FATAL_CATEGORIES = frozenset({ErrorCategory.OPEN, ErrorCategory.PREPARE, ErrorCategory.SELECTION})


@dataclass
class ErrorContext:
    """Error context information."""
    error_id: str
    timestamp: float
    category: ErrorCategory
    severity: ErrorSeverity
    message: str

    @property
    def is_fatal(self) -> bool:
        return self.category in FATAL_CATEGORIES


class ErrorReporter(ABC):
    """Operator error channel."""

    @abstractmethod
    def report(self, message: str, category: ErrorCategory = ErrorCategory.OPEN) -> Optional[ErrorContext]:
        """Surface a fatal condition to the operator."""
        pass

    @abstractmethod
    def report_summary(self, summary: str) -> None:
        """Surface the end-of-run error summary to the operator."""
        pass


class LoggingErrorReporter(ErrorReporter):
    """
    Operator error channel backed by logging.

    Keeps a bounded history of reported errors and the last end-of-run
    summary so callers without a UI can inspect what the operator would
    have been shown.
    """

    def __init__(self, max_history_size: int = 1000):
        self.error_history: List[ErrorContext] = []
        self.max_history_size = max_history_size
        self.last_summary: Optional[str] = None

    def report(self, message: str, category: ErrorCategory = ErrorCategory.OPEN) -> ErrorContext:
        """Report a fatal condition to the operator."""
        context = ErrorContext(
            error_id=str(uuid4()),
            timestamp=time.time(),
            category=category,
            severity=ErrorSeverity.CRITICAL,
            message=message
        )
        self._add_to_history(context)

        logger.error(f"Export error [{category.value}]: {message}")
        return context

    def report_summary(self, summary: str) -> None:
        """Report the end-of-run error summary to the operator."""
        self.last_summary = summary
        logger.warning(f"Export errors!\n{summary}")

    @property
    def messages(self) -> List[str]:
        return [context.message for context in self.error_history]

    def _add_to_history(self, context: ErrorContext):
        self.error_history.append(context)

        # Maintain history size limit
        if len(self.error_history) > self.max_history_size:
            self.error_history = self.error_history[-self.max_history_size:]

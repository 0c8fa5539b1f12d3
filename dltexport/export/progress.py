"""
Progress reporting for export runs.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ProgressObserver(ABC):
    """Receives the progress of an export run."""

    @abstractmethod
    def start(self, size: int) -> None:
        pass

    @abstractmethod
    def update(self, count: int) -> None:
        pass

    @abstractmethod
    def done(self) -> None:
        pass

    @property
    def cancelled(self) -> bool:
        return False


class TqdmProgressObserver(ProgressObserver):
    """
    Interactive progress bar showing the completed percentage.

    The bar only advances when the rounded percentage grows, so a large
    export does not redraw once per message. ``cancel()`` asks the running
    export to stop after the current message.
    """

    def __init__(self, description: str = "Export ...", file=None,
                 min_interval: float = 0.1, disable: Optional[bool] = None):
        self.description = description
        self.file = file or sys.stderr
        self.min_interval = min_interval
        # Only draw when attached to a terminal unless told otherwise
        self.disable = not self.file.isatty() if disable is None else disable
        self.size = 0
        self.last = 0
        self._bar: Optional[tqdm] = None
        self._cancelled = False

    def start(self, size: int) -> None:
        self.size = size
        self.last = 0
        self._cancelled = False
        self._bar = tqdm(
            total=100,
            desc=self.description,
            unit="%",
            file=self.file,
            disable=self.disable,
            dynamic_ncols=True,
            mininterval=self.min_interval,
        )

    def update(self, count: int) -> None:
        if self._bar is None or self.size <= 0:
            return

        progress = round(count / self.size * 100)
        if progress > self.last:
            self._bar.update(progress - self.last)
            self.last = progress

    def done(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def cancel(self) -> None:
        logger.info("Export cancelled by operator")
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class SilentProgressObserver(ProgressObserver):

    def start(self, size: int) -> None:
        pass

    def update(self, count: int) -> None:
        pass

    def done(self) -> None:
        pass


def create_progress_observer(silent_mode: bool, min_interval: float = 0.1) -> ProgressObserver:
    """Silent runs get no progress display."""
    if silent_mode:
        return SilentProgressObserver()
    return TqdmProgressObserver(min_interval=min_interval)

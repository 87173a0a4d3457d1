"""Interfaces that connect printer drivers, language monitors and the print channel."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable


class JobStatus(enum.IntEnum):
    """State of the current print job as reported to the spooler."""

    OK = 0
    PAPER_OUT = 1
    ERROR = 2
    DELETED = 3
    PAPER_SIZE_ERROR = 4
    PAPER_SIZE_UNDEFINED_ERROR = 5
    HEAD_OVERHEAT = 6
    SLOT_STATUS_ERROR = 7
    BUSY = 8


class PrintEnvironment(ABC):
    """Channel to the printer: sends data, reads replies and tracks the job status."""

    def __init__(self) -> None:
        self.job_status: JobStatus = JobStatus.OK

    @abstractmethod
    def write_data(self, data: bytes) -> None:
        """Send bytes to the printer."""

    @abstractmethod
    def read_data(self) -> bytes:
        """Read whatever the printer has sent back; empty if nothing."""


class PrinterDriver(ABC):
    """Turns raster lines into printer commands."""

    @abstractmethod
    def start_doc(self) -> None:
        """Begin a document."""

    @abstractmethod
    def end_doc(self) -> None:
        """Finish a document."""

    @abstractmethod
    def start_page(self) -> None:
        """Begin a page."""

    @abstractmethod
    def end_page(self) -> None:
        """Finish a page."""

    @abstractmethod
    def process_raster_line(self, line: bytes) -> None:
        """Handle one line of 1-bit raster data."""


class LanguageMonitor(ABC):
    """Watches the data sent to the printer and the printer's status."""

    @abstractmethod
    def start_doc(self) -> None:
        """Begin a document."""

    @abstractmethod
    def end_doc(self) -> None:
        """Finish a document."""

    @abstractmethod
    def start_page(self) -> None:
        """Begin a page."""

    @abstractmethod
    def end_page(self) -> None:
        """Finish a page."""

    @abstractmethod
    def process_data(self, data: bytes) -> None:
        """Observe a chunk of data on its way to the printer."""


class MemoryPrintEnvironment(PrintEnvironment):
    """Print environment that keeps written data in memory and replays queued replies."""

    def __init__(self, responses: Iterable[bytes] = ()) -> None:
        super().__init__()
        self.writes: list[bytes] = []
        self.responses: deque[bytes] = deque(bytes(r) for r in responses)

    @property
    def data(self) -> bytes:
        """Everything written so far, joined together."""
        return b"".join(self.writes)

    def write_data(self, data: bytes) -> None:
        self.writes.append(bytes(data))

    def read_data(self) -> bytes:
        return self.responses.popleft() if self.responses else b""

    def clear(self) -> None:
        """Forget everything written so far."""
        self.writes.clear()
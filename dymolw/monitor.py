"""Language monitor that watches LabelWriter status and reprints failed labels."""

from __future__ import annotations

import enum
import os
import sys
import time

from .driver import (
    PaperType,
    Roll,
    request_status_command,
    reset_command,
    roll_select_command,
    short_form_feed_command,
)
from .environment import JobStatus, LanguageMonitor, PrintEnvironment

_POLL_INTERVAL = 0.2


class StatusBit(enum.IntFlag):
    """Bits of the status byte the printer reports."""

    TOF = 0x02
    ROLL_CHANGED = 0x08
    PAPER_OUT = 0x20
    PAPER_FEED = 0x40
    ERROR = 0x80


def _debug(message: str) -> None:
    print(f"DEBUG: {message}", file=sys.stderr)


class LabelWriterLanguageMonitor(LanguageMonitor):
    """Keeps the data of the current label and reprints it when the printer reports a fault."""

    def __init__(
        self,
        environment: PrintEnvironment,
        use_sleep: bool = True,
        read_status_timeout: float = 10,
    ) -> None:
        self.environment = environment
        self.paper_type = PaperType.REGULAR
        self._roll = Roll.AUTO
        self.roll_used = False
        self.is_first_page = True
        self.page_data = bytearray()
        self.use_sleep = use_sleep
        self.last_status = 0
        self.read_status_timeout = read_status_timeout

    @property
    def roll(self) -> Roll:
        """Roll in use; setting it makes the monitor select the roll at document start."""
        return self._roll

    @roll.setter
    def roll(self, value: Roll) -> None:
        self._roll = value
        self.roll_used = True

    def start_doc(self) -> None:
        self.is_first_page = True
        self.environment.write_data(reset_command())
        if self.roll_used:
            self.environment.write_data(roll_select_command(self._roll))

    def end_doc(self) -> None:
        _debug("LabelWriterLanguageMonitor.end_doc()")

    def start_page(self) -> None:
        _debug("LabelWriterLanguageMonitor.start_page()")
        if self.is_first_page:
            self._check_status_and_reprint()
        self.is_first_page = False

    def end_page(self) -> None:
        _debug("LabelWriterLanguageMonitor.end_page()")
        self._check_status_and_reprint()

    def process_data(self, data: bytes) -> None:
        self.page_data.extend(data)

    def is_local(self) -> bool:
        """True when the printer is attached over USB, or when no device URI is known."""
        uri = os.environ.get("DEVICE_URI")
        return uri is None or uri.startswith("usb://")

    def _check_status_and_reprint(self) -> None:
        self._set_job_status(StatusBit.TOF)
        if not self.is_local():
            return

        # A reprint can fail as well, so the status is checked again after each one.
        while True:
            begin = time.monotonic()
            status = self._read_status() or 0
            wanted = StatusBit.TOF | StatusBit.ERROR | StatusBit.ROLL_CHANGED
            while not status & wanted and time.monotonic() - begin < self.read_status_timeout:
                status = self._read_status() or 0

            if time.monotonic() - begin >= self.read_status_timeout:
                _debug("status check timed out")
                break

            if status & (StatusBit.ERROR | StatusBit.ROLL_CHANGED) or not status & StatusBit.TOF:
                if not status & StatusBit.TOF and not status & StatusBit.ROLL_CHANGED:
                    status |= StatusBit.ERROR
                self._set_job_status(status)
                if self._poll_until_paper_in():
                    self._set_job_status(StatusBit.TOF)
                    self._reprint_label()
            else:
                break

        self.page_data.clear()

    def _read_status(self) -> int | None:
        """Ask the printer for its status byte; None if it did not answer."""
        self.last_status = 0
        self.environment.write_data(request_status_command())
        reply = self.environment.read_data()
        if not reply:
            _debug("status read returned nothing")
            return None
        status = reply[0]
        if self.paper_type == PaperType.CONTINUOUS:
            status |= StatusBit.TOF
        self.last_status = int(status)
        _debug(f"status read returned {status:x}")
        return int(status)

    def _poll_until_paper_in(self) -> bool:
        while True:
            if self.use_sleep:
                time.sleep(_POLL_INTERVAL)
            if self.environment.job_status == JobStatus.DELETED:
                return False
            status = self._read_status()
            if status is None:
                return False
            self._set_job_status(status)
            if status & StatusBit.TOF and not status & StatusBit.ERROR:
                return True

    def _set_job_status(self, status: int) -> None:
        if status & (StatusBit.PAPER_OUT | StatusBit.PAPER_FEED):
            job_status = JobStatus.PAPER_OUT
        elif status & StatusBit.ERROR:
            job_status = JobStatus.ERROR
        else:
            job_status = JobStatus.OK
        self.environment.job_status = job_status

    def _reprint_label(self) -> None:
        _debug("LabelWriterLanguageMonitor reprinting label")
        if not self.last_status & StatusBit.ROLL_CHANGED:
            self.environment.write_data(short_form_feed_command())
        self.environment.write_data(bytes(self.page_data))
"""Raster filter that feeds pages through a LabelWriter driver and language monitor."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from .driver import LabelWriterDriver, LabelWriterDriver400, LabelWriterDriverTwinTurbo
from .environment import JobStatus, LanguageMonitor, PrintEnvironment
from .monitor import LabelWriterLanguageMonitor
from .options import PageHeader, process_page_options, process_ppd_options

_TWIN_TURBO_MODELS = {
    "dymo labelwriter twin turbo",
    "dymo labelwriter 450 twin turbo",
}
_SERIES_400_MODELS = {
    "dymo labelwriter 400",
    "dymo labelwriter 400 turbo",
    "dymo labelwriter duo label",
    "dymo labelwriter 4xl",
    "dymo labelwriter 450",
    "dymo labelwriter 450 turbo",
    "dymo labelwriter 450 duo label",
}


@dataclass
class RasterPage:
    """One page of raster input: its header and its lines of 1-bit pixels."""

    header: PageHeader
    lines: Sequence[bytes] = field(default_factory=list)


def select_driver_class(model_name: str | None) -> type[LabelWriterDriver]:
    """Pick the driver class that suits a printer model name (case-insensitive)."""
    name = (model_name or "").casefold()
    if name in _TWIN_TURBO_MODELS:
        return LabelWriterDriverTwinTurbo
    if name in _SERIES_400_MODELS:
        return LabelWriterDriver400
    return LabelWriterDriver


class _DriverChannel(PrintEnvironment):
    """Channel the driver writes to: the monitor sees each chunk before the printer does."""

    def __init__(self, target: PrintEnvironment, monitor: LanguageMonitor) -> None:
        self._target = target
        self._monitor = monitor

    @property
    def job_status(self) -> JobStatus:  # type: ignore[override]
        return self._target.job_status

    @job_status.setter
    def job_status(self, value: JobStatus) -> None:
        self._target.job_status = value

    def write_data(self, data: bytes) -> None:
        self._monitor.process_data(data)
        self._target.write_data(data)

    def read_data(self) -> bytes:
        return self._target.read_data()


def _log(message: str) -> None:
    print(message, file=sys.stderr)


class LabelWriterFilter:
    """Drives a document of raster pages through the driver suited to the printer model."""

    def __init__(
        self,
        environment: PrintEnvironment,
        model_name: str | None = None,
        choices: Mapping[str, str] | None = None,
    ) -> None:
        self.environment = environment
        self.model_name = model_name
        self.choices = choices
        self.monitor = LabelWriterLanguageMonitor(environment)
        driver_class = select_driver_class(model_name)
        self.driver = driver_class(_DriverChannel(environment, self.monitor))

    def run(self, pages: Iterable[RasterPage]) -> int:
        """Print every page and return how many pages were started.

        Raises ValueError for a page whose pixels take more than one bit,
        since such pages would need halftoning first.
        """
        if self.choices is None:
            _log("WARNING: no PPD choices given, using default settings")
        else:
            _log(f"DEBUG: options are: {dict(self.choices)}")
            process_ppd_options(self.driver, self.monitor, self.choices, self.model_name)

        self.monitor.start_doc()
        self.driver.start_doc()

        page_count = 0
        for page in pages:
            page_count += 1
            header = page.header
            _log(f"PAGE: {page_count} 1")
            _log(f"DEBUG: bytes per line = {header.bytes_per_line}")
            _log(f"DEBUG: bits per color = {header.bits_per_color}")
            _log(f"DEBUG: bits per pixel = {header.bits_per_pixel}")
            _log(f"DEBUG: color order = {header.color_order}")
            _log(f"DEBUG: height = {header.height}")

            if header.bits_per_pixel > 1:
                raise ValueError(
                    f"page {page_count} has {header.bits_per_pixel} bits per pixel; "
                    "only 1-bit raster is accepted"
                )

            process_page_options(self.driver, self.monitor, header)
            self.monitor.start_page()
            if self.environment.job_status != JobStatus.OK:
                break

            self.driver.start_page()
            self._print_lines(page, page_count)
            self.driver.end_page()
            self.monitor.end_page()

        self.driver.end_doc()
        self.monitor.end_doc()

        if page_count == 0:
            _log("ERROR: No pages found!")
        else:
            _log("INFO: Ready to print.")
        return page_count

    def _print_lines(self, page: RasterPage, page_number: int) -> None:
        header = page.header
        lines = iter(page.lines)
        for y in range(header.height):
            if y % 16 == 0:
                _log(
                    f"INFO: Printing page {page_number}, "
                    f"{100 * y // header.height}% complete..."
                )
            line = bytes(next(lines, b""))
            if len(line) != header.bytes_per_line:
                _log(
                    f"ERROR: raster line read failed: expected {header.bytes_per_line} "
                    f"bytes, got {len(line)}"
                )
                break
            self.driver.process_raster_line(line)
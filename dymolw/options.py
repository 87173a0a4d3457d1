"""Applying PPD choices and per-page raster settings to LabelWriter drivers."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field

from .driver import (
    Density,
    LabelWriterDriver,
    LabelWriterDriverTwinTurbo,
    PaperType,
    Quality,
    Resolution,
    Roll,
)
from .environment import LanguageMonitor
from .monitor import LabelWriterLanguageMonitor

_RESOLUTIONS = {"203dpi": Resolution.RES_204, "203x138dpi": Resolution.RES_136}
_QUALITIES = {"text": Quality.TEXT, "graphics": Quality.BARCODE_AND_GRAPHICS}
_DENSITIES = {
    "light": Density.LOW,
    "medium": Density.MEDIUM,
    "normal": Density.NORMAL,
    "dark": Density.HIGH,
}
_ROLLS = {"left": Roll.LEFT, "right": Roll.RIGHT}

_NARROW_MODELS = {
    "dymo labelwriter 300",
    "dymo labelwriter 310",
    "dymo labelwriter 315",
}
_MODEL_WIDTHS = {
    **{name: 58 for name in _NARROW_MODELS},
    "dymo labelwriter 4xl": 156,
    "dymo labelwriter se450": 56,
}


@dataclass
class PageHeader:
    """The parts of a raster page header the filter and drivers use."""

    media_type: int = 0
    page_size: tuple[int, int] = (0, 0)
    hw_resolution: tuple[int, int] = (0, 0)
    cups_integer: tuple[int, ...] = field(default_factory=lambda: (0,) * 16)
    bytes_per_line: int = 0
    bits_per_color: int = 1
    bits_per_pixel: int = 1
    color_order: int = 0
    height: int = 0


def _warn(message: str) -> None:
    print(f"WARNING: {message}", file=sys.stderr)


def _lookup(choices: Mapping[str, str], keyword: str, table: dict, label: str):
    choice = choices.get(keyword)
    if choice is None:
        _warn(f"unable to get {label} choice")
        return None
    return table.get(choice.casefold())


def process_ppd_options(
    driver: LabelWriterDriver,
    monitor: LanguageMonitor,
    choices: Mapping[str, str],
    model_name: str | None,
) -> None:
    """Set the driver (and monitor) from the marked PPD choices and the printer model."""
    resolution = _lookup(choices, "Resolution", _RESOLUTIONS, "Resolution")
    if resolution is not None:
        driver.resolution = resolution

    quality = _lookup(choices, "DymoPrintQuality", _QUALITIES, "PrintQuality")
    if quality is not None:
        driver.quality = quality

    density = _lookup(choices, "DymoPrintDensity", _DENSITIES, "PrintDensity")
    if density is not None:
        driver.density = density

    width = _MODEL_WIDTHS.get((model_name or "").casefold())
    if width is not None:
        driver.max_print_width = width

    if isinstance(driver, LabelWriterDriverTwinTurbo):
        slot = choices.get("InputSlot")
        if slot is None:
            _warn("unable to get InputSlot choice")
        else:
            driver.roll = _ROLLS.get(slot.casefold(), Roll.AUTO)
        if isinstance(monitor, LabelWriterLanguageMonitor):
            monitor.roll = driver.roll


def process_page_options(
    driver: LabelWriterDriver,
    monitor: LanguageMonitor,
    header: PageHeader,
) -> None:
    """Set paper type, page height and offset from a page header."""
    if header.media_type in (PaperType.REGULAR, PaperType.CONTINUOUS):
        driver.paper_type = PaperType(header.media_type)
    else:
        _warn(f"Invalid value for cupsMediaType ({header.media_type})")
        driver.paper_type = PaperType.REGULAR

    driver.page_height = header.page_size[1] * header.hw_resolution[1] // 72
    driver.page_offset = (header.cups_integer[0], 0)

    # Twin Turbo models leave the monitor's paper type untouched.
    if isinstance(monitor, LabelWriterLanguageMonitor) and not isinstance(
        driver, LabelWriterDriverTwinTurbo
    ):
        monitor.paper_type = driver.paper_type
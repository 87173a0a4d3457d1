"""Raster-to-command driver for printers that speak the LabelWriter command set."""

from __future__ import annotations

import enum
import itertools
import sys

from .environment import PrintEnvironment, PrinterDriver

ESC = 0x1B
SYN = 0x16
ETB = 0x17

_MAX_RUN = 0x80
_MAX_SKIP_LINES = 255


class Density(enum.IntEnum):
    LOW = 0
    MEDIUM = 1
    NORMAL = 2
    HIGH = 3


class Quality(enum.IntEnum):
    TEXT = 0
    BARCODE_AND_GRAPHICS = 1


class PaperType(enum.IntEnum):
    REGULAR = 0
    CONTINUOUS = 1


class Resolution(enum.IntEnum):
    UNKNOWN = 0
    RES_136 = 1
    RES_204 = 2


class Roll(enum.IntEnum):
    AUTO = 0
    LEFT = 1
    RIGHT = 2


_RESOLUTION_CODES = {Resolution.RES_136: b"z", Resolution.RES_204: b"y"}
_DENSITY_CODES = {Density.LOW: b"c", Density.MEDIUM: b"d", Density.NORMAL: b"e", Density.HIGH: b"g"}
_QUALITY_CODES = {Quality.TEXT: b"h", Quality.BARCODE_AND_GRAPHICS: b"i"}
_ROLL_CODES = {Roll.LEFT: b"1", Roll.RIGHT: b"2"}


def reset_command() -> bytes:
    """Command that brings the printer out of any half-finished job."""
    return bytes([ESC]) * 156


def request_status_command() -> bytes:
    return bytes([ESC]) + b"A"


def short_form_feed_command() -> bytes:
    return bytes([ESC]) + b"G"


def roll_select_command(roll: Roll) -> bytes:
    return bytes([ESC]) + b"q" + _ROLL_CODES.get(roll, b"0")


def compress_line(data: bytes) -> bytes:
    """Run-length encode the bits of ``data``.

    Each output byte holds the colour of a run in its high bit and the run
    length minus one in the low seven bits. Returns an empty result when the
    encoding would not be shorter than the input.
    """
    data = bytes(data)
    bits = ((byte >> shift) & 1 for byte in data for shift in range(7, -1, -1))
    encoded = bytearray()
    for bit, group in itertools.groupby(bits):
        length = sum(1 for _ in group)
        while length > 0:
            chunk = min(length, _MAX_RUN)
            encoded.append((chunk - 1) | (0x80 if bit else 0))
            length -= chunk
            if len(encoded) > len(data) - 1:
                return b""
    return bytes(encoded)


def _shift_right(data: bytes, out: bytearray, shift: int) -> None:
    offset, bit_shift = divmod(shift, 8)
    limit = len(out) - offset
    if limit <= 0 or not data:
        return
    out[offset] = data[0] >> bit_shift
    count = min(len(data), limit)
    for i, (prev, cur) in enumerate(zip(data[: count - 1], data[1:count]), start=1):
        out[offset + i] = ((prev << (8 - bit_shift)) | (cur >> bit_shift)) & 0xFF
    if max(count, 1) < limit:
        out[offset + len(data)] = (data[-1] << (8 - bit_shift)) & 0xFF


def _shift_left(data: bytes, out: bytearray, shift: int) -> None:
    limit = len(out) - shift // 8
    bit_shift = shift % 8
    if limit <= 0 or not data:
        return
    count = min(len(data) - 1, limit)
    for i, (cur, nxt) in enumerate(zip(data[:count], data[1 : count + 1])):
        out[i] = ((cur << bit_shift) | (nxt >> (8 - bit_shift))) & 0xFF
    if count < limit and len(data) - 1 < len(out):
        out[len(data) - 1] = (data[-1] << bit_shift) & 0xFF


def shift_line(data: bytes, width: int, shift: int) -> bytes:
    """Shift a line of bits by ``shift`` pixels (right when positive) into ``width`` bytes."""
    out = bytearray(width)
    if shift >= 0:
        _shift_right(bytes(data), out, shift)
    else:
        _shift_left(bytes(data), out, -shift)
    return bytes(out)


def _blanks(line: bytes) -> tuple[int, int]:
    stripped = line.lstrip(b"\x00")
    leader = len(line) - len(stripped)
    if not stripped:
        return leader, 0
    return leader, len(stripped) - len(stripped.rstrip(b"\x00"))


class LabelWriterDriver(PrinterDriver):
    """Driver for the basic LabelWriter models."""

    def __init__(self, environment: PrintEnvironment) -> None:
        self.environment = environment
        self.resolution = Resolution.UNKNOWN
        self.density = Density.NORMAL
        self.quality = Quality.TEXT
        self.page_height = 0x0800
        self.paper_type = PaperType.REGULAR
        self.max_print_width = 84
        self.page_offset: tuple[int, int] = (0, 0)
        self.empty_lines_count = 0
        self._last_dot_tab: int | None = None
        self._last_bytes_per_line: int | None = None

    def start_doc(self) -> None:
        self._send(reset_command())
        if self.resolution in _RESOLUTION_CODES:
            self._send_esc(_RESOLUTION_CODES[self.resolution])
        self._send_esc(b"Q", *self._word(0))
        self._send_esc(b"B", 0)
        self._send_esc(_QUALITY_CODES.get(self.quality, b"h"))
        self._send_esc(_DENSITY_CODES.get(self.density, b"e"))

    def end_doc(self) -> None:
        pass

    def start_page(self) -> None:
        length = 0xFFFF if self.paper_type == PaperType.CONTINUOUS else self.page_height
        self._send_esc(b"L", *self._word(length))
        self._last_dot_tab = None
        self._last_bytes_per_line = None
        self.empty_lines_count = 0

    def end_page(self) -> None:
        self._send_esc(b"E")

    def process_raster_line(self, line: bytes) -> None:
        line = bytes(line)
        offset_x = self.page_offset[0]
        if offset_x > 0:
            line = shift_line(line, len(line) + (offset_x + 7) // 8, offset_x)

        if len(line) > self.max_print_width:
            print(
                "WARNING: page width is greater than max page width, truncated",
                file=sys.stderr,
            )
            line = line[: self.max_print_width]

        leader, trailer = _blanks(line)
        if leader + trailer == len(line):
            self.empty_lines_count += 1
            return

        if self.empty_lines_count:
            self._send_skip_lines(self.empty_lines_count)
        self.empty_lines_count = 0

        # A dot tab goes out before every line; some models distort the output otherwise.
        self._send_esc(b"B", leader & 0xFF)
        self._last_dot_tab = leader

        payload = line[leader : len(line) - trailer]
        compressed = compress_line(payload)
        self._send_bytes_per_line(len(payload))
        if compressed:
            self._send(bytes([ETB]))
            self._send(compressed)
        else:
            self._send(bytes([SYN]))
            self._send(payload)

    def _send(self, data: bytes) -> None:
        self.environment.write_data(bytes(data))

    def _send_esc(self, code: bytes, *args: int) -> None:
        self._send(bytes([ESC]) + code + bytes(args))

    @staticmethod
    def _word(value: int) -> tuple[int, int]:
        return (value >> 8) & 0xFF, value & 0xFF

    def _send_bytes_per_line(self, value: int) -> None:
        if self._last_bytes_per_line != value:
            self._send_esc(b"D", value & 0xFF)
            self._last_bytes_per_line = value

    def _send_skip_lines(self, count: int) -> None:
        while count > 0:
            chunk = min(count, _MAX_SKIP_LINES)
            self._send_esc(b"f", 1, chunk)
            count -= chunk


class LabelWriterDriver400(LabelWriterDriver):
    """Driver for the 400/450 series, which feed labels with a short form feed."""

    def end_doc(self) -> None:
        self._send_esc(b"E")

    def end_page(self) -> None:
        self._send(short_form_feed_command())


class LabelWriterDriverTwinTurbo(LabelWriterDriver400):
    """Driver for the two-roll Twin Turbo models."""

    def __init__(self, environment: PrintEnvironment) -> None:
        super().__init__(environment)
        self.roll = Roll.AUTO

    def start_doc(self) -> None:
        super().start_doc()
        self._send(roll_select_command(self.roll))
"""Shared types, timing constants, a pulse recorder and a raw-buffer decoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag, auto
from typing import Iterable, Iterator

VERSION = "3.3.0"
VERSION_MAJOR = 3
VERSION_MINOR = 3

MARK_EXCESS_MICROS = 20
"""Subtracted from marks and added to spaces when matching received timings."""

RECORD_GAP_MICROS = 5000
RECORD_GAP_MICROS_WARNING_THRESHOLD = 20000
MICROS_PER_TICK = 50
RECORD_GAP_TICKS = RECORD_GAP_MICROS // MICROS_PER_TICK
TOLERANCE_PERCENT = 25

INPUT_MARK = 0
RAWBUF = 101
REPEAT = 0xFFFFFFFF

SPACE = 0
MARK = 1


class Protocol(IntEnum):
    UNKNOWN = 0
    PULSE_DISTANCE = auto()
    PULSE_WIDTH = auto()
    DENON = auto()
    JVC = auto()
    LG = auto()
    NEC = auto()
    PANASONIC = auto()
    KASEIKYO = auto()
    RC5 = auto()
    RC6 = auto()
    SAMSUNG = auto()
    SHARP = auto()
    SONY = auto()
    ONKYO = auto()
    APPLE = auto()
    BOSEWAVE = auto()
    LEGO_PF = auto()
    MAGIQUEST = auto()
    WHYNTER = auto()


class IRFlags(IntFlag):
    IS_LSB_FIRST = 0x00
    IS_REPEAT = 0x01
    IS_AUTO_REPEAT = 0x02
    PARITY_FAILED = 0x04
    TOGGLE_BIT = 0x08
    EXTRA_INFO = 0x10
    WAS_OVERFLOW = 0x40
    IS_MSB_FIRST = 0x80


@dataclass
class IRData:
    """The result of a decode."""

    protocol: Protocol = Protocol.UNKNOWN
    address: int = 0
    command: int = 0
    extra: int = 0
    number_of_bits: int = 0
    flags: IRFlags = IRFlags.IS_LSB_FIRST
    decoded_raw_data: int = 0


@dataclass
class LegacyResult:
    """The result of an MSB-first legacy decode."""

    decode_type: Protocol = Protocol.UNKNOWN
    value: int = 0
    bits: int = 0


class DecodeError(ValueError):
    """Raised when a raw buffer does not match the expected protocol."""


def _bit_sequence(data: int, bits: int, msb_first: bool) -> Iterator[bool]:
    if bits < 0:
        raise ValueError(f"number of bits must not be negative: {bits}")
    positions = range(bits - 1, -1, -1) if msb_first else range(bits)
    return ((data >> position) & 1 == 1 for position in positions)


class IRSender:
    """Records the marks and spaces of an IR transmission.

    Consecutive intervals of the same kind are merged, as a receiver
    would see them.
    """

    def __init__(self) -> None:
        self.frequency_khz: int | None = None
        self._segments: list[list] = []

    def enable_ir_out(self, khz: int) -> None:
        if khz <= 0:
            raise ValueError(f"carrier frequency must be positive: {khz}")
        self.frequency_khz = khz

    def mark(self, micros: int) -> None:
        self._append(True, micros)

    def space(self, micros: int) -> None:
        self._append(False, micros)

    def delay(self, millis: int) -> None:
        """Stay silent for ``millis`` milliseconds."""
        self._append(False, millis * 1000)

    def clear(self) -> None:
        self.frequency_khz = None
        self._segments.clear()

    def _append(self, is_mark: bool, micros: int) -> None:
        if micros < 0:
            raise ValueError(f"duration must not be negative: {micros}")
        if micros == 0:
            return
        if self._segments and self._segments[-1][0] == is_mark:
            self._segments[-1][1] += micros
        else:
            self._segments.append([is_mark, micros])

    @property
    def segments(self) -> list[tuple[bool, int]]:
        """All intervals as (is_mark, micros), leading silence included."""
        return [(is_mark, micros) for is_mark, micros in self._segments]

    @property
    def timings(self) -> list[int]:
        """Alternating durations starting with the first mark."""
        durations = iter(self._segments)
        result: list[int] = []
        for is_mark, micros in durations:
            if is_mark:
                result.append(micros)
                result.extend(m for _, m in durations)
        return result

    def send_pulse_distance_width_data(
        self, one_mark, one_space, zero_mark, zero_space, data, bits, msb_first=False, stop_bit=False
    ) -> None:
        """Send ``bits`` bits of ``data``, each as a mark followed by a space."""
        for bit in _bit_sequence(data, bits, msb_first):
            if bit:
                self.mark(one_mark)
                self.space(one_space)
            else:
                self.mark(zero_mark)
                self.space(zero_space)
        if stop_bit:
            self.mark(zero_mark)

    def send_biphase_data(self, unit, data, bits) -> None:
        """Send a start bit of 1 and then ``bits`` bits MSB first in Manchester code.

        A 1 is a space followed by a mark, a 0 a mark followed by a space.
        """
        for bit in (True, *_bit_sequence(data, bits, True)):
            if bit:
                self.space(unit)
                self.mark(unit)
            else:
                self.mark(unit)
                self.space(unit)


class IRDecoder:
    """Holds a raw buffer of received timings in ticks and the decode state.

    ``rawbuf[0]`` is the gap before the frame, then marks and spaces alternate.
    """

    def __init__(self, rawbuf: Iterable[int] = ()) -> None:
        self.last_address = 0
        self.last_command = 0
        self.last_protocol = Protocol.UNKNOWN
        self.load(rawbuf)

    def load(self, rawbuf: Iterable[int]) -> None:
        """Replace the buffer and reset the results of the previous decode."""
        ticks = [int(t) for t in rawbuf]
        if any(t < 0 for t in ticks):
            raise ValueError("timings must not be negative")
        self.rawbuf = ticks
        self.decoded = IRData()
        self.results = LegacyResult()
        self.biphase_offset = 0
        self._biphase_unit = 0
        self._biphase_used_intervals = 0
        self._biphase_current_intervals = 0

    @property
    def rawlen(self) -> int:
        return len(self.rawbuf)

    @staticmethod
    def _match_ticks(measured: int, micros: int) -> bool:
        low = micros * (100 - TOLERANCE_PERCENT) // (100 * MICROS_PER_TICK)
        high = micros * (100 + TOLERANCE_PERCENT) // (100 * MICROS_PER_TICK) + 1
        return low <= measured <= high

    def match_mark(self, measured: int, expected: int) -> bool:
        """True if ``measured`` ticks fit a mark of ``expected`` microseconds."""
        return self._match_ticks(measured, expected + MARK_EXCESS_MICROS)

    def match_space(self, measured: int, expected: int) -> bool:
        """True if ``measured`` ticks fit a space of ``expected`` microseconds."""
        return self._match_ticks(measured, expected - MARK_EXCESS_MICROS)

    @staticmethod
    def _assemble(bit_values: Iterable[bool], msb_first: bool) -> int:
        value = 0
        for position, bit in enumerate(bit_values):
            if msb_first:
                value = (value << 1) | int(bit)
            else:
                value |= int(bit) << position
        return value

    def decode_pulse_distance_data(self, bits, offset, bit_mark, one_space, zero_space, msb_first=False) -> int:
        """Decode bits whose value lies in the space length; store and return the value."""
        end = offset + 2 * bits
        if end > self.rawlen:
            raise DecodeError(f"need {end} timings, buffer has {self.rawlen}")
        bit_values = []
        for mark_ticks, space_ticks in zip(self.rawbuf[offset:end:2], self.rawbuf[offset + 1:end:2]):
            if not self.match_mark(mark_ticks, bit_mark):
                raise DecodeError(f"mark of {mark_ticks} ticks does not match {bit_mark} us")
            if self.match_space(space_ticks, one_space):
                bit_values.append(True)
            elif self.match_space(space_ticks, zero_space):
                bit_values.append(False)
            else:
                raise DecodeError(f"space of {space_ticks} ticks matches neither one nor zero")
        value = self._assemble(bit_values, msb_first)
        self.decoded.decoded_raw_data = value
        return value

    def decode_pulse_width_data(self, bits, offset, one_mark, zero_mark, bit_space, msb_first=False) -> int:
        """Decode bits whose value lies in the mark length; store and return the value.

        The space after the last mark is not recorded and is not checked.
        """
        end = offset + 2 * bits
        marks = self.rawbuf[offset:end:2]
        if len(marks) < bits:
            raise DecodeError(f"need {bits} marks, buffer has {len(marks)}")
        bit_values = []
        for mark_ticks in marks:
            if self.match_mark(mark_ticks, one_mark):
                bit_values.append(True)
            elif self.match_mark(mark_ticks, zero_mark):
                bit_values.append(False)
            else:
                raise DecodeError(f"mark of {mark_ticks} ticks matches neither one nor zero")
        for space_ticks in self.rawbuf[offset + 1:end:2]:
            if not self.match_space(space_ticks, bit_space):
                raise DecodeError(f"space of {space_ticks} ticks does not match {bit_space} us")
        value = self._assemble(bit_values, msb_first)
        self.decoded.decoded_raw_data = value
        return value

    def init_biphase_level(self, offset: int, unit: int) -> None:
        """Start reading biphase levels at buffer index ``offset``."""
        self.biphase_offset = offset
        self._biphase_unit = unit
        self._biphase_used_intervals = 0
        self._biphase_current_intervals = 0

    def get_biphase_level(self) -> int:
        """Return the level (MARK or SPACE) of the next time unit.

        Past the end of the buffer the level is SPACE.
        """
        if self.biphase_offset >= self.rawlen:
            return SPACE
        level = MARK if self.biphase_offset & 1 else SPACE
        if self._biphase_used_intervals == 0:
            ticks = self.rawbuf[self.biphase_offset]
            correction = MARK_EXCESS_MICROS if level == MARK else -MARK_EXCESS_MICROS
            for intervals in (1, 2, 3):
                if self._match_ticks(ticks, intervals * self._biphase_unit + correction):
                    self._biphase_current_intervals = intervals
                    break
            else:
                raise DecodeError(f"timing of {ticks} ticks is no multiple of {self._biphase_unit} us")
        self._biphase_used_intervals += 1
        if self._biphase_used_intervals >= self._biphase_current_intervals:
            self._biphase_used_intervals = 0
            self.biphase_offset += 1
        return level

    def remember(self, data: IRData) -> None:
        """Keep address, command and protocol of a decode for following repeats."""
        self.last_address = data.address
        self.last_command = data.command
        self.last_protocol = data.protocol
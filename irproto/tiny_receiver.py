"""A minimal NEC receiver driven by the edges of the IR input signal."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Optional

from .feedback_led import FeedbackLED, LOW
from .longunion import LongUnion

NEC_ADDRESS_BITS = 16
NEC_COMMAND_BITS = 16
NEC_BITS = NEC_ADDRESS_BITS + NEC_COMMAND_BITS
NEC_UNIT = 560

NEC_HEADER_MARK = 16 * NEC_UNIT
NEC_HEADER_SPACE = 8 * NEC_UNIT

NEC_BIT_MARK = NEC_UNIT
NEC_ONE_SPACE = 3 * NEC_UNIT
NEC_ZERO_SPACE = NEC_UNIT

NEC_REPEAT_HEADER_SPACE = 4 * NEC_UNIT
NEC_REPEAT_PERIOD = 110000

_MASK8 = 0xFF
_MASK16 = 0xFFFF
_MASK32 = 0xFFFF_FFFF


def lower_value_25_percent(duration: int) -> int:
    """Lower bound of a timing with 25 % tolerance."""
    return duration - duration // 4


def upper_value_25_percent(duration: int) -> int:
    """Upper bound of a timing with 25 % tolerance."""
    return duration + duration // 4


def lower_value(duration: int) -> int:
    """Lower bound of a timing with 50 % tolerance."""
    return duration - duration // 2


def upper_value(duration: int) -> int:
    """Upper bound of a timing with 50 % tolerance."""
    return duration + duration // 2


class ReceiverState(IntEnum):
    WAITING_FOR_START_MARK = 0
    WAITING_FOR_START_SPACE = 1
    WAITING_FOR_FIRST_DATA_MARK = 2
    WAITING_FOR_DATA_SPACE = 3
    WAITING_FOR_DATA_MARK = 4
    WAITING_FOR_STOP_MARK = 5


Callback = Callable[[int, int, bool], None]


class TinyIRReceiver:
    """NEC decoding state machine fed with input level changes.

    The input is active low: level 0 starts a mark, any other level a space.
    No parity check is done. On a complete frame or repeat the callback is
    called with ``(address, command, is_repeat)``.
    """

    def __init__(self, callback: Callback, feedback: Optional[FeedbackLED] = None) -> None:
        self._callback = callback
        self._feedback = feedback
        self.last_change_micros = 0
        self.reset()

    def reset(self) -> None:
        """Return to waiting for a start mark and forget received data."""
        self.state = ReceiverState.WAITING_FOR_START_MARK
        self.bit_counter = 0
        self.raw_data_mask = 1
        self.raw_data = LongUnion(0)
        self.repeat_detected = False

    def handle_change(self, level: int, micros: int) -> ReceiverState:
        """Process an input change to ``level`` at time ``micros``; return the new state."""
        if self._feedback is not None:
            self._feedback.set(level == LOW)

        now = int(micros) & _MASK32
        duration = ((now - self.last_change_micros) & _MASK32) & _MASK16
        self.last_change_micros = now

        if level == LOW:
            state = self._on_mark(duration)
        else:
            state = self._on_space(duration)
        return state

    def _on_mark(self, duration: int) -> ReceiverState:
        state = self.state
        if duration > 2 * NEC_HEADER_MARK:
            state = ReceiverState.WAITING_FOR_START_MARK

        if state == ReceiverState.WAITING_FOR_START_MARK:
            state = ReceiverState.WAITING_FOR_START_SPACE
        elif state == ReceiverState.WAITING_FOR_FIRST_DATA_MARK:
            if lower_value_25_percent(NEC_HEADER_SPACE) <= duration <= upper_value_25_percent(NEC_HEADER_SPACE):
                self.bit_counter = 0
                self.raw_data = LongUnion(0)
                self.raw_data_mask = 1
                self.repeat_detected = False
                state = ReceiverState.WAITING_FOR_DATA_SPACE
            elif (
                lower_value_25_percent(NEC_REPEAT_HEADER_SPACE)
                <= duration
                <= upper_value_25_percent(NEC_REPEAT_HEADER_SPACE)
                and self.bit_counter >= NEC_BITS
            ):
                self.repeat_detected = True
                state = ReceiverState.WAITING_FOR_DATA_SPACE
            else:
                state = ReceiverState.WAITING_FOR_START_MARK
        elif state == ReceiverState.WAITING_FOR_DATA_MARK:
            if lower_value(NEC_ZERO_SPACE) <= duration <= upper_value(NEC_ONE_SPACE):
                state = ReceiverState.WAITING_FOR_DATA_SPACE
                if duration >= 2 * NEC_UNIT:
                    self.raw_data = LongUnion(self.raw_data.value | self.raw_data_mask)
                self.raw_data_mask = (self.raw_data_mask << 1) & _MASK32
                self.bit_counter = (self.bit_counter + 1) & _MASK8
            else:
                state = ReceiverState.WAITING_FOR_START_MARK
        else:
            state = ReceiverState.WAITING_FOR_START_MARK

        self.state = state
        return state

    def _on_space(self, duration: int) -> ReceiverState:
        state = self.state
        if state == ReceiverState.WAITING_FOR_START_SPACE:
            if lower_value_25_percent(NEC_HEADER_MARK) <= duration <= upper_value_25_percent(NEC_HEADER_MARK):
                state = ReceiverState.WAITING_FOR_FIRST_DATA_MARK
            else:
                state = ReceiverState.WAITING_FOR_START_MARK
        elif state == ReceiverState.WAITING_FOR_DATA_SPACE:
            if lower_value(NEC_BIT_MARK) <= duration <= upper_value(NEC_BIT_MARK):
                if self.bit_counter >= NEC_BITS or self.repeat_detected:
                    self.state = ReceiverState.WAITING_FOR_START_MARK
                    self._complete()
                    return self.state
                state = ReceiverState.WAITING_FOR_DATA_MARK
            else:
                state = ReceiverState.WAITING_FOR_START_MARK
        else:
            state = ReceiverState.WAITING_FOR_START_MARK

        self.state = state
        return state

    def _complete(self) -> None:
        data = self.raw_data
        if data.low_byte == (~data.mid_low_byte & _MASK8):
            # 8 bit address followed by its inverse: keep only the address
            data = data.with_byte(1, 0)
            self.raw_data = data
        self._callback(data.low_word, data.mid_high_byte, self.repeat_detected)
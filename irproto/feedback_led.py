"""Blinking of a feedback LED while IR data is sent or received."""

from __future__ import annotations

from typing import Callable

HIGH = 1
LOW = 0


class FeedbackLED:
    """Controls a feedback LED through pin callbacks.

    Pin 0 selects the board's built-in LED, if one is given.
    """

    def __init__(
        self,
        write_pin: Callable[[int, int], None],
        set_output: Callable[[int], None],
        builtin_pin: int | None = None,
        active_low: bool = False,
    ) -> None:
        self._write_pin = write_pin
        self._set_output = set_output
        self.builtin_pin = builtin_pin
        self.active_low = active_low
        self.pin = 0
        self.enabled = False

    def configure(self, pin: int, enabled: bool) -> None:
        """Choose the LED pin and switch blinking on or off."""
        self.pin = pin
        self.enabled = enabled
        if enabled:
            if pin != 0:
                self._set_output(pin)
            elif self.builtin_pin is not None:
                self._set_output(self.builtin_pin)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def set(self, on: bool) -> None:
        """Switch the LED on or off, if blinking is enabled."""
        if not self.enabled:
            return
        pin = self.pin if self.pin != 0 else self.builtin_pin
        if pin is None:
            return
        level = HIGH if on else LOW
        if self.active_low:
            level = LOW if on else HIGH
        self._write_pin(pin, level)

    def blink13(self, enabled: bool) -> None:
        """Switch blinking on or off, keeping the pin."""
        self.configure(self.pin, enabled)

    def set_blink_pin(self, pin: int) -> None:
        """Change the pin, keeping the enabled state."""
        self.configure(pin, self.enabled)
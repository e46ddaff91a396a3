"""A 32-bit value with views on its bytes and 16-bit words."""

from __future__ import annotations

from dataclasses import dataclass

_MASK8 = 0xFF
_MASK16 = 0xFFFF
_MASK32 = 0xFFFF_FFFF


def _signed(value: int, bits: int) -> int:
    sign = 1 << (bits - 1)
    return (value ^ sign) - sign


@dataclass(frozen=True)
class LongUnion:
    """An unsigned 32-bit value. Byte 0 and word 0 are the least significant.

    Values given to the constructor and to the builders are truncated to
    their width, so ``~x`` can be stored directly as a byte or word.
    """

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", int(self.value) & _MASK32)

    @classmethod
    def from_bytes(cls, low_byte, mid_low_byte, mid_high_byte, high_byte) -> "LongUnion":
        """Build a value from its four bytes, lowest first."""
        parts = (low_byte, mid_low_byte, mid_high_byte, high_byte)
        value = 0
        for shift, part in zip(range(0, 32, 8), parts):
            value |= (int(part) & _MASK8) << shift
        return cls(value)

    @classmethod
    def from_words(cls, low_word, high_word) -> "LongUnion":
        """Build a value from its two 16-bit words, lowest first."""
        return cls(((int(high_word) & _MASK16) << 16) | (int(low_word) & _MASK16))

    def with_byte(self, index: int, value: int) -> "LongUnion":
        """Return a copy with byte ``index`` (0..3) replaced."""
        if not 0 <= index <= 3:
            raise IndexError(f"byte index {index} out of range 0..3")
        shift = 8 * index
        cleared = self.value & ~(_MASK8 << shift)
        return LongUnion(cleared | ((int(value) & _MASK8) << shift))

    def with_word(self, index: int, value: int) -> "LongUnion":
        """Return a copy with word ``index`` (0..1) replaced."""
        if not 0 <= index <= 1:
            raise IndexError(f"word index {index} out of range 0..1")
        shift = 16 * index
        cleared = self.value & ~(_MASK16 << shift)
        return LongUnion(cleared | ((int(value) & _MASK16) << shift))

    def __int__(self) -> int:
        return self.value

    @property
    def ubytes(self) -> tuple[int, int, int, int]:
        return tuple(self.value.to_bytes(4, "little"))  # type: ignore[return-value]

    @property
    def signed_bytes(self) -> tuple[int, int, int, int]:
        return tuple(_signed(b, 8) for b in self.ubytes)  # type: ignore[return-value]

    @property
    def low_byte(self) -> int:
        return self.value & _MASK8

    @property
    def mid_low_byte(self) -> int:
        return (self.value >> 8) & _MASK8

    @property
    def mid_high_byte(self) -> int:
        return (self.value >> 16) & _MASK8

    @property
    def high_byte(self) -> int:
        return (self.value >> 24) & _MASK8

    @property
    def mid_word(self) -> int:
        """The 16 bits made of the mid low and mid high byte."""
        return (self.value >> 8) & _MASK16

    @property
    def low_word(self) -> int:
        return self.value & _MASK16

    @property
    def high_word(self) -> int:
        return (self.value >> 16) & _MASK16

    @property
    def uwords(self) -> tuple[int, int]:
        return (self.low_word, self.high_word)

    @property
    def signed_words(self) -> tuple[int, int]:
        return (_signed(self.low_word, 16), _signed(self.high_word, 16))

    @property
    def signed_value(self) -> int:
        return _signed(self.value, 32)
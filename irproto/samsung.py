"""Sending and decoding of the Samsung IR protocol.

A frame is LSB first: a header, 16 address bits, 16 command bits (8 bits
followed by their inverse) or 32 command bits for Samsung48, and a stop bit.
Repeat frames look like NEC repeats but carry two stop bits.
"""

from __future__ import annotations

from .core import (
    REPEAT,
    DecodeError,
    IRData,
    IRDecoder,
    IRFlags,
    IRSender,
    LegacyResult,
    Protocol,
)
from .longunion import LongUnion

SAMSUNG_ADDRESS_BITS = 16
SAMSUNG_COMMAND16_BITS = 16
SAMSUNG_COMMAND32_BITS = 32
SAMSUNG_BITS = SAMSUNG_ADDRESS_BITS + SAMSUNG_COMMAND16_BITS
SAMSUNG48_BITS = SAMSUNG_ADDRESS_BITS + SAMSUNG_COMMAND32_BITS

SAMSUNG_UNIT = 550
SAMSUNG_HEADER_MARK = 8 * SAMSUNG_UNIT
SAMSUNG_HEADER_SPACE = 8 * SAMSUNG_UNIT
SAMSUNG_BIT_MARK = SAMSUNG_UNIT
SAMSUNG_ONE_SPACE = 3 * SAMSUNG_UNIT
SAMSUNG_ZERO_SPACE = SAMSUNG_UNIT

SAMSUNG_AVERAGE_DURATION = 55000
SAMSUNG_REPEAT_DURATION = (
    SAMSUNG_HEADER_MARK + SAMSUNG_HEADER_SPACE + SAMSUNG_BIT_MARK + SAMSUNG_ZERO_SPACE + SAMSUNG_BIT_MARK
)
SAMSUNG_REPEAT_PERIOD = 110000

SAMSUNG_CARRIER_KHZ = 38
SAMSUNG_FRAME_LENGTH = 2 * SAMSUNG_BITS + 4
SAMSUNG48_FRAME_LENGTH = 2 * SAMSUNG48_BITS + 4
SAMSUNG_REPEAT_LENGTH = 6

LEGACY_REPEAT_LENGTH = 4
LEGACY_REPEAT_HEADER_SPACE = 2250

_MASK8 = 0xFF
_MASK16 = 0xFFFF


def send_samsung_repeat(sender: IRSender) -> None:
    """Send one repeat frame."""
    sender.enable_ir_out(SAMSUNG_CARRIER_KHZ)
    sender.mark(SAMSUNG_HEADER_MARK)
    sender.space(SAMSUNG_HEADER_SPACE)
    sender.mark(SAMSUNG_BIT_MARK)
    sender.space(SAMSUNG_ZERO_SPACE)
    sender.mark(SAMSUNG_BIT_MARK)


def send_samsung(sender: IRSender, address: int, command: int, repeats: int = 0, is_repeat: bool = False) -> None:
    """Send a frame with 16 address bits and an 8 bit command followed by its inverse.

    ``repeats`` repeat frames follow in a 110 ms raster. With ``is_repeat``
    only a single repeat frame is sent.
    """
    if is_repeat:
        send_samsung_repeat(sender)
        return

    sender.enable_ir_out(SAMSUNG_CARRIER_KHZ)
    sender.mark(SAMSUNG_HEADER_MARK)
    sender.space(SAMSUNG_HEADER_SPACE)

    sender.send_pulse_distance_width_data(
        SAMSUNG_BIT_MARK,
        SAMSUNG_ONE_SPACE,
        SAMSUNG_BIT_MARK,
        SAMSUNG_ZERO_SPACE,
        address & _MASK16,
        SAMSUNG_ADDRESS_BITS,
        False,
        False,
    )

    command &= _MASK8
    command = ((~command << 8) | command) & _MASK16
    sender.send_pulse_distance_width_data(
        SAMSUNG_BIT_MARK,
        SAMSUNG_ONE_SPACE,
        SAMSUNG_BIT_MARK,
        SAMSUNG_ZERO_SPACE,
        command,
        SAMSUNG_COMMAND16_BITS,
        False,
        True,
    )

    for index in range(repeats):
        if index == 0:
            sender.delay((SAMSUNG_REPEAT_PERIOD - SAMSUNG_AVERAGE_DURATION) // 1000)
        else:
            sender.delay((SAMSUNG_REPEAT_PERIOD - SAMSUNG_REPEAT_DURATION) // 1000)
        send_samsung_repeat(sender)


def _decode_bits(decoder: IRDecoder, bits: int, msb_first: bool = False) -> int:
    return decoder.decode_pulse_distance_data(
        bits, 3, SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_ZERO_SPACE, msb_first
    )


def decode_samsung(decoder: IRDecoder) -> IRData:
    """Decode a Samsung32, Samsung48 or repeat frame from the decoder's buffer.

    A repeat frame takes address and command from what the decoder remembers.
    Raises DecodeError if the buffer is no such frame.
    """
    rawlen = decoder.rawlen
    if rawlen not in (SAMSUNG_FRAME_LENGTH, SAMSUNG48_FRAME_LENGTH, SAMSUNG_REPEAT_LENGTH):
        raise DecodeError(
            f"Samsung: data length {rawlen} is not "
            f"{SAMSUNG_FRAME_LENGTH} or {SAMSUNG48_FRAME_LENGTH} or {SAMSUNG_REPEAT_LENGTH}"
        )
    rawbuf = decoder.rawbuf
    if not decoder.match_mark(rawbuf[1], SAMSUNG_HEADER_MARK) or not decoder.match_space(
        rawbuf[2], SAMSUNG_HEADER_SPACE
    ):
        raise DecodeError("Samsung: header mark or space length is wrong")

    data = decoder.decoded
    if rawlen == SAMSUNG_REPEAT_LENGTH:
        data.flags = IRFlags.IS_REPEAT | IRFlags.IS_LSB_FIRST
        data.address = decoder.last_address
        data.command = decoder.last_command
        data.protocol = Protocol.SAMSUNG
        return data

    if rawlen == SAMSUNG48_FRAME_LENGTH:
        data.address = _decode_bits(decoder, SAMSUNG_ADDRESS_BITS)
        value = LongUnion(_decode_bits(decoder, SAMSUNG_COMMAND32_BITS))
        if value.high_byte != (~value.mid_high_byte & _MASK8) and value.mid_low_byte != (
            ~value.low_byte & _MASK8
        ):
            data.flags = IRFlags.PARITY_FAILED | IRFlags.IS_LSB_FIRST
        data.command = (value.high_byte << 8) | value.mid_low_byte
        data.number_of_bits = SAMSUNG48_BITS
    else:
        value = LongUnion(_decode_bits(decoder, SAMSUNG_BITS))
        data.address = value.low_word
        if value.mid_high_byte == (~value.high_byte & _MASK8):
            data.command = value.mid_high_byte
        else:
            data.command = value.high_word
        data.number_of_bits = SAMSUNG_BITS

    data.protocol = Protocol.SAMSUNG
    return data


def decode_samsung_msb(decoder: IRDecoder) -> LegacyResult:
    """Decode a Samsung frame MSB first into a legacy result.

    An NEC-like repeat frame yields the value REPEAT with 0 bits.
    """
    rawlen = decoder.rawlen
    if rawlen < 2:
        raise DecodeError(f"Samsung MSB: data length {rawlen} is too short")
    rawbuf = decoder.rawbuf
    results = decoder.results
    data = decoder.decoded

    if not decoder.match_mark(rawbuf[1], SAMSUNG_HEADER_MARK):
        raise DecodeError("Samsung MSB: header mark length is wrong")

    if (
        rawlen == LEGACY_REPEAT_LENGTH
        and decoder.match_space(rawbuf[2], LEGACY_REPEAT_HEADER_SPACE)
        and decoder.match_mark(rawbuf[3], SAMSUNG_BIT_MARK)
    ):
        results.bits = 0
        results.value = REPEAT
        data.flags = IRFlags.IS_REPEAT
        data.protocol = Protocol.SAMSUNG
        return results

    if rawlen < SAMSUNG_FRAME_LENGTH:
        raise DecodeError(f"Samsung MSB: data length {rawlen} is shorter than {SAMSUNG_FRAME_LENGTH}")

    if not decoder.match_space(rawbuf[2], SAMSUNG_HEADER_SPACE):
        raise DecodeError("Samsung MSB: header space length is wrong")

    results.value = _decode_bits(decoder, SAMSUNG_BITS, True)
    results.bits = SAMSUNG_BITS
    results.decode_type = Protocol.SAMSUNG
    data.protocol = Protocol.SAMSUNG
    return results


def send_samsung_msb(sender: IRSender, data: int, nbits: int = SAMSUNG_BITS) -> None:
    """Send an old-style MSB-first code followed by a stop bit."""
    sender.enable_ir_out(SAMSUNG_CARRIER_KHZ)
    sender.mark(SAMSUNG_HEADER_MARK)
    sender.space(SAMSUNG_HEADER_SPACE)
    sender.send_pulse_distance_width_data(
        SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_BIT_MARK, SAMSUNG_ZERO_SPACE, data, nbits, True, True
    )
"""Sending and decoding of the Sony SIRCS protocol.

A frame is LSB first: a header, 7 command bits and 5, 8 or 13 address bits,
without a stop bit. The bit value lies in the length of the mark.
"""

from __future__ import annotations

from .core import (
    MICROS_PER_TICK,
    REPEAT,
    DecodeError,
    IRData,
    IRDecoder,
    IRFlags,
    IRSender,
    LegacyResult,
    Protocol,
)

SONY_ADDRESS_BITS = 5
SONY_COMMAND_BITS = 7
SONY_EXTRA_BITS = 8
SONY_BITS_MIN = SONY_COMMAND_BITS + SONY_ADDRESS_BITS
SONY_BITS_15 = SONY_COMMAND_BITS + SONY_ADDRESS_BITS + 3
SONY_BITS_MAX = SONY_COMMAND_BITS + SONY_ADDRESS_BITS + SONY_EXTRA_BITS
SONY_UNIT = 600

SONY_HEADER_MARK = 4 * SONY_UNIT
SONY_ONE_MARK = 2 * SONY_UNIT
SONY_ZERO_MARK = SONY_UNIT
SONY_SPACE = SONY_UNIT

SONY_AVERAGE_DURATION = 21000
SONY_REPEAT_PERIOD = 45000
SONY_REPEAT_SPACE = SONY_REPEAT_PERIOD - SONY_AVERAGE_DURATION

SONY_DOUBLE_SPACE_USECS = 500
SONY_CARRIER_KHZ = 40

_VALID_LENGTHS = tuple(2 * bits + 2 for bits in (SONY_BITS_MIN, SONY_BITS_15, SONY_BITS_MAX))


def send_sony(
    sender: IRSender, address: int, command: int, repeats: int = 0, number_of_bits: int = SONY_BITS_MIN
) -> None:
    """Send 7 command bits and ``number_of_bits - 7`` address bits, repeated in a 45 ms raster."""
    sender.enable_ir_out(SONY_CARRIER_KHZ)
    frames = repeats + 1
    for index in range(frames):
        sender.mark(SONY_HEADER_MARK)
        sender.space(SONY_SPACE)
        sender.send_pulse_distance_width_data(
            SONY_ONE_MARK, SONY_SPACE, SONY_ZERO_MARK, SONY_SPACE, command, SONY_COMMAND_BITS, False, False
        )
        sender.send_pulse_distance_width_data(
            SONY_ONE_MARK,
            SONY_SPACE,
            SONY_ZERO_MARK,
            SONY_SPACE,
            address,
            number_of_bits - SONY_COMMAND_BITS,
            False,
            False,
        )
        if index < frames - 1:
            sender.delay(SONY_REPEAT_SPACE // 1000)


def decode_sony(decoder: IRDecoder) -> IRData:
    """Decode a 12, 15 or 20 bit Sony frame from the decoder's buffer.

    Raises DecodeError if the buffer is no such frame.
    """
    rawlen = decoder.rawlen
    if rawlen < 2:
        raise DecodeError(f"Sony: data length {rawlen} is too short")
    rawbuf = decoder.rawbuf
    if not decoder.match_mark(rawbuf[1], SONY_HEADER_MARK):
        raise DecodeError("Sony: header mark length is wrong")
    if rawlen not in _VALID_LENGTHS:
        raise DecodeError(f"Sony: data length {rawlen} is not one of {_VALID_LENGTHS}")
    if not decoder.match_space(rawbuf[2], SONY_SPACE):
        raise DecodeError("Sony: header space length is wrong")

    bits = (rawlen - 1) // 2
    value = decoder.decode_pulse_width_data(bits, 3, SONY_ONE_MARK, SONY_ZERO_MARK, SONY_SPACE, False)

    data = decoder.decoded
    if rawbuf[0] < SONY_REPEAT_PERIOD // MICROS_PER_TICK:
        data.flags = IRFlags.IS_REPEAT | IRFlags.IS_LSB_FIRST
    data.command = value & 0x7F
    data.address = (value >> SONY_COMMAND_BITS) & 0xFFFF
    data.number_of_bits = bits
    data.protocol = Protocol.SONY
    return data


def decode_sony_msb(decoder: IRDecoder) -> LegacyResult:
    """Decode a Sony frame MSB first into a legacy result.

    A very short gap before the frame yields the value REPEAT with 0 bits.
    """
    rawlen = decoder.rawlen
    if rawlen < 2 * SONY_BITS_MIN + 2:
        raise DecodeError(f"Sony MSB: data length {rawlen} is too short")
    rawbuf = decoder.rawbuf
    results = decoder.results
    data = decoder.decoded

    if rawbuf[0] < SONY_DOUBLE_SPACE_USECS // MICROS_PER_TICK:
        results.bits = 0
        results.value = REPEAT
        data.flags = IRFlags.IS_REPEAT
        data.protocol = Protocol.SONY
        return results

    if not decoder.match_mark(rawbuf[1], SONY_HEADER_MARK):
        raise DecodeError("Sony MSB: header mark length is wrong")

    value = 0
    bits = 0
    for space_ticks, mark_ticks in zip(rawbuf[2:rawlen - 1:2], rawbuf[3:rawlen:2]):
        if not decoder.match_space(space_ticks, SONY_SPACE):
            raise DecodeError(f"Sony MSB: space of {space_ticks} ticks is wrong")
        if decoder.match_mark(mark_ticks, SONY_ONE_MARK):
            value = (value << 1) | 1
        elif decoder.match_mark(mark_ticks, SONY_ZERO_MARK):
            value <<= 1
        else:
            raise DecodeError(f"Sony MSB: mark of {mark_ticks} ticks matches neither one nor zero")
        bits += 1

    results.bits = bits
    results.value = value
    results.decode_type = Protocol.SONY
    data.protocol = Protocol.SONY
    return results


def send_sony_msb(sender: IRSender, data: int, nbits: int = SONY_BITS_MIN) -> None:
    """Send an old-style MSB-first code."""
    sender.enable_ir_out(SONY_CARRIER_KHZ)
    sender.mark(SONY_HEADER_MARK)
    sender.space(SONY_SPACE)
    sender.send_pulse_distance_width_data(
        SONY_ONE_MARK, SONY_SPACE, SONY_ZERO_MARK, SONY_SPACE, data, nbits, True, False
    )
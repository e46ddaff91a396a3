"""Sending and decoding of the NEC protocol and its Apple and Onkyo variants.

A frame is LSB first: a header, 16 address bits (or 8 address bits followed
by their inverse), 8 command bits followed by their inverse (16 independent
command bits for Onkyo) and a stop bit. Held keys send short repeat frames.
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

NEC_AVERAGE_DURATION = 62000
NEC_REPEAT_DURATION = NEC_HEADER_MARK + NEC_REPEAT_HEADER_SPACE + NEC_BIT_MARK
NEC_REPEAT_PERIOD = 110000
NEC_REPEAT_SPACE = NEC_REPEAT_PERIOD - NEC_AVERAGE_DURATION

NEC_CARRIER_KHZ = 38
NEC_FRAME_LENGTH = 2 * NEC_BITS + 4
NEC_REPEAT_LENGTH = 4

APPLE_ADDRESS = 0x87EE

_MASK8 = 0xFF
_MASK16 = 0xFFFF


def send_nec_repeat(sender: IRSender) -> None:
    """Send one repeat frame."""
    sender.enable_ir_out(NEC_CARRIER_KHZ)
    sender.mark(NEC_HEADER_MARK)
    sender.space(NEC_REPEAT_HEADER_SPACE)
    sender.mark(NEC_BIT_MARK)


def send_nec(sender: IRSender, address: int, command: int, repeats: int = 0, is_repeat: bool = False) -> None:
    """Send an NEC frame; an address below 0x100 is sent with its inverse."""
    address &= _MASK16
    if address & 0xFF00 == 0:
        raw = LongUnion.from_bytes(address, ~address, command, ~command)
    else:
        raw = LongUnion.from_words(address, 0).with_byte(2, command).with_byte(3, ~command)
    send_nec_raw(sender, raw.value, repeats, is_repeat)


def send_onkyo(sender: IRSender, address: int, command: int, repeats: int = 0, is_repeat: bool = False) -> None:
    """Send an NEC frame with 16 address bits and 16 independent command bits."""
    send_nec_raw(sender, LongUnion.from_words(address, command).value, repeats, is_repeat)


def send_apple(sender: IRSender, device_id: int, command: int, repeats: int = 0, is_repeat: bool = False) -> None:
    """Send an Apple frame: the fixed Apple address, the command, then the device id."""
    raw = LongUnion.from_words(APPLE_ADDRESS, 0).with_byte(2, command).with_byte(3, device_id)
    send_nec_raw(sender, raw.value, repeats, is_repeat)


def send_nec_raw(sender: IRSender, raw_data: int, repeats: int = 0, is_repeat: bool = False) -> None:
    """Send 32 bits LSB first, then ``repeats`` repeat frames in a 110 ms raster.

    With ``is_repeat`` only a single repeat frame is sent.
    """
    if is_repeat:
        send_nec_repeat(sender)
        return
    sender.enable_ir_out(NEC_CARRIER_KHZ)
    sender.mark(NEC_HEADER_MARK)
    sender.space(NEC_HEADER_SPACE)
    sender.send_pulse_distance_width_data(
        NEC_BIT_MARK, NEC_ONE_SPACE, NEC_BIT_MARK, NEC_ZERO_SPACE, raw_data, NEC_BITS, False, True
    )
    for index in range(repeats):
        if index == 0:
            sender.delay(NEC_REPEAT_SPACE // 1000)
        else:
            sender.delay((NEC_REPEAT_PERIOD - NEC_REPEAT_DURATION) // 1000)
        send_nec_repeat(sender)


def decode_nec(decoder: IRDecoder) -> IRData:
    """Decode NEC, Apple or Onkyo from the decoder's buffer.

    A repeat frame takes address, command and protocol from what the decoder
    remembers. Raises DecodeError if the buffer is no such frame.
    """
    rawlen = decoder.rawlen
    if rawlen not in (NEC_FRAME_LENGTH, NEC_REPEAT_LENGTH):
        raise DecodeError(f"NEC: data length {rawlen} is not {NEC_FRAME_LENGTH} or {NEC_REPEAT_LENGTH}")
    rawbuf = decoder.rawbuf
    if not decoder.match_mark(rawbuf[1], NEC_HEADER_MARK):
        raise DecodeError("NEC: header mark length is wrong")

    data = decoder.decoded
    if rawlen == NEC_REPEAT_LENGTH:
        if decoder.match_space(rawbuf[2], NEC_REPEAT_HEADER_SPACE) and decoder.match_mark(rawbuf[3], NEC_BIT_MARK):
            data.flags = IRFlags.IS_REPEAT | IRFlags.IS_LSB_FIRST
            data.address = decoder.last_address
            data.command = decoder.last_command
            data.protocol = decoder.last_protocol
            return data
        raise DecodeError("NEC: repeat frame timing is wrong")

    if not decoder.match_space(rawbuf[2], NEC_HEADER_SPACE):
        raise DecodeError("NEC: header space length is wrong")

    value = LongUnion(
        decoder.decode_pulse_distance_data(NEC_BITS, 3, NEC_BIT_MARK, NEC_ONE_SPACE, NEC_ZERO_SPACE, False)
    )

    if not decoder.match_mark(rawbuf[3 + 2 * NEC_BITS], NEC_BIT_MARK):
        raise DecodeError("NEC: stop bit mark length is wrong")

    data.flags = IRFlags.IS_LSB_FIRST
    data.command = value.mid_high_byte
    if value.low_word == APPLE_ADDRESS:
        data.protocol = Protocol.APPLE
        data.address = value.high_byte
    else:
        if value.low_byte == (~value.mid_low_byte & _MASK8):
            data.address = value.low_byte
        else:
            data.address = value.low_word
        if value.mid_high_byte == (~value.high_byte & _MASK8):
            data.protocol = Protocol.NEC
        else:
            data.protocol = Protocol.ONKYO
            data.command = value.high_word
    data.number_of_bits = NEC_BITS
    return data


def decode_nec_msb(decoder: IRDecoder) -> LegacyResult:
    """Decode an NEC frame MSB first into a legacy result.

    A repeat frame yields the value REPEAT with 0 bits.
    """
    rawlen = decoder.rawlen
    if rawlen < NEC_REPEAT_LENGTH:
        raise DecodeError(f"NEC MSB: data length {rawlen} is too short")
    rawbuf = decoder.rawbuf
    results = decoder.results
    data = decoder.decoded

    if not decoder.match_mark(rawbuf[1], NEC_HEADER_MARK):
        raise DecodeError("NEC MSB: header mark length is wrong")

    if (
        rawlen == NEC_REPEAT_LENGTH
        and decoder.match_space(rawbuf[2], NEC_REPEAT_HEADER_SPACE)
        and decoder.match_mark(rawbuf[3], NEC_BIT_MARK)
    ):
        results.bits = 0
        results.value = REPEAT
        data.flags |= IRFlags.IS_REPEAT
        data.protocol = Protocol.NEC
        return results

    if rawlen != NEC_FRAME_LENGTH:
        raise DecodeError(f"NEC MSB: data length {rawlen} is not {NEC_FRAME_LENGTH}")

    if not decoder.match_space(rawbuf[2], NEC_HEADER_SPACE):
        raise DecodeError("NEC MSB: header space length is wrong")

    value = decoder.decode_pulse_distance_data(NEC_BITS, 3, NEC_BIT_MARK, NEC_ONE_SPACE, NEC_ZERO_SPACE, True)

    if not decoder.match_mark(rawbuf[3 + 2 * NEC_BITS], NEC_BIT_MARK):
        raise DecodeError("NEC MSB: stop bit mark length is wrong")

    results.value = value
    results.bits = NEC_BITS
    results.decode_type = Protocol.NEC
    data.protocol = Protocol.NEC
    return results


def send_nec_msb(sender: IRSender, data: int, nbits: int = NEC_BITS, repeat: bool = False) -> None:
    """Send an old-style MSB-first code; REPEAT or ``repeat`` sends a repeat frame.

    An MSB-first code is the bit mirror of the LSB-first raw data, e.g.
    0xCB340102 corresponds to 0x40802CD3.
    """
    sender.enable_ir_out(NEC_CARRIER_KHZ)
    if data == REPEAT or repeat:
        send_nec_repeat(sender)
        return
    sender.mark(NEC_HEADER_MARK)
    sender.space(NEC_HEADER_SPACE)
    sender.send_pulse_distance_width_data(
        NEC_BIT_MARK, NEC_ONE_SPACE, NEC_BIT_MARK, NEC_ZERO_SPACE, data, nbits, True, True
    )
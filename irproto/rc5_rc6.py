"""Sending and decoding of the Philips RC5, RC5X, RC6 and RC6A protocols.

Both protocols use Manchester (biphase) code, MSB first. In RC5 a 1 is a
space followed by a mark. In RC6 it is the other way round, and the
toggle bit is twice as long as the other bits.
"""

from __future__ import annotations

from .core import (
    MARK,
    MICROS_PER_TICK,
    SPACE,
    DecodeError,
    IRData,
    IRDecoder,
    IRFlags,
    IRSender,
    Protocol,
)
from .longunion import LongUnion

_MASK32 = 0xFFFF_FFFF

RC5_ADDRESS_BITS = 5
RC5_COMMAND_BITS = 6
RC5_COMMAND_FIELD_BIT = 1
RC5_TOGGLE_BIT = 1
RC5_BITS = RC5_COMMAND_FIELD_BIT + RC5_TOGGLE_BIT + RC5_ADDRESS_BITS + RC5_COMMAND_BITS

RC5_UNIT = 889
MIN_RC5_MARKS = (RC5_BITS + 1) // 2

RC5_DURATION = 15 * RC5_UNIT
RC5_REPEAT_PERIOD = 128 * RC5_UNIT
RC5_REPEAT_SPACE = RC5_REPEAT_PERIOD - RC5_DURATION

RC5_FIELD_BIT_MASK = 1 << (RC5_TOGGLE_BIT + RC5_ADDRESS_BITS + RC5_COMMAND_BITS)
RC5_TOGGLE_BIT_MASK = 1 << (RC5_ADDRESS_BITS + RC5_COMMAND_BITS)

RC6_LEADING_BIT = 1
RC6_MODE_BITS = 3
RC6_TOGGLE_BIT = 1
RC6_ADDRESS_BITS = 8
RC6_COMMAND_BITS = 8
RC6_BITS = RC6_LEADING_BIT + RC6_MODE_BITS + RC6_TOGGLE_BIT + RC6_ADDRESS_BITS + RC6_COMMAND_BITS

RC6_UNIT = 444
RC6_HEADER_MARK = 6 * RC6_UNIT
RC6_HEADER_SPACE = 2 * RC6_UNIT
RC6_TRAILING_SPACE = 6 * RC6_UNIT
MIN_RC6_MARKS = 4 + (RC6_ADDRESS_BITS + RC6_COMMAND_BITS) // 2

RC6_REPEAT_SPACE = 107000
RC6A_MIN_BITS = 36

CARRIER_KHZ = 36


class _Toggle:
    """A toggle bit kept between transmissions."""

    def __init__(self, value: bool) -> None:
        self.value = value

    def flip(self) -> bool:
        self.value = not self.value
        return self.value


_send_toggle = _Toggle(False)
_rc5ext_toggle = _Toggle(True)


def _send_manchester_bit(sender: IRSender, bit: bool, duration: int, one_starts_with_mark: bool) -> None:
    if bit == one_starts_with_mark:
        sender.mark(duration)
        sender.space(duration)
    else:
        sender.space(duration)
        sender.mark(duration)


def send_rc5(sender: IRSender, address: int, command: int, repeats: int = 0, auto_toggle: bool = True) -> None:
    """Send an RC5 frame; a command of 0x40 or more switches to RC5X.

    With ``auto_toggle`` the toggle bit alternates between calls.
    """
    sender.enable_ir_out(CARRIER_KHZ)
    command &= 0xFF
    ir_data = (address & 0x1F) << RC5_COMMAND_BITS
    if command < 0x40:
        # the field bit is the inverted 7th command bit
        ir_data |= RC5_FIELD_BIT_MASK
    else:
        command &= 0x3F
    ir_data |= command

    if auto_toggle and _send_toggle.flip():
        ir_data |= RC5_TOGGLE_BIT_MASK

    frames = repeats + 1
    for index in range(frames):
        sender.send_biphase_data(RC5_UNIT, ir_data, RC5_BITS)
        if index < frames - 1:
            sender.delay(RC5_REPEAT_SPACE // 1000)


def decode_rc5(decoder: IRDecoder) -> IRData:
    """Decode an RC5 or RC5X frame from the decoder's buffer.

    Raises DecodeError if the buffer is no such frame.
    """
    decoder.init_biphase_level(1, RC5_UNIT)
    if decoder.get_biphase_level() != MARK:
        raise DecodeError("RC5: first level is not a mark")

    value = 0
    bit_count = 0
    while decoder.biphase_offset < decoder.rawlen:
        start_level = decoder.get_biphase_level()
        end_level = decoder.get_biphase_level()
        if start_level == SPACE and end_level == MARK:
            value = (value << 1) | 1
        elif start_level == MARK and end_level == SPACE:
            value <<= 1
        else:
            raise DecodeError("RC5: no transition inside a bit")
        value &= _MASK32
        bit_count += 1

    union = LongUnion(value)
    data = decoder.decoded
    data.number_of_bits = bit_count
    data.decoded_raw_data = value
    data.command = union.low_byte & 0x3F
    data.address = (union.low_word >> RC5_COMMAND_BITS) & 0x1F
    if union.low_word & RC5_FIELD_BIT_MASK == 0:
        data.command += 0x40

    data.flags = IRFlags.IS_MSB_FIRST
    if union.mid_low_byte & 0x8:
        data.flags = IRFlags.TOGGLE_BIT | IRFlags.IS_MSB_FIRST

    if decoder.rawbuf[0] < RC5_REPEAT_PERIOD // MICROS_PER_TICK:
        data.flags |= IRFlags.IS_REPEAT

    data.protocol = Protocol.RC5
    return data


def send_rc6_raw(sender: IRSender, data: int, bits: int) -> None:
    """Send header, leading bit and ``bits`` bits of ``data`` MSB first.

    The fourth data bit is the double-width toggle bit. No trailing space is sent.
    """
    if bits < 0:
        raise ValueError(f"number of bits must not be negative: {bits}")
    sender.enable_ir_out(CARRIER_KHZ)
    sender.mark(RC6_HEADER_MARK)
    sender.space(RC6_HEADER_SPACE)
    sender.mark(RC6_UNIT)
    sender.space(RC6_UNIT)
    for number, position in enumerate(range(bits - 1, -1, -1), start=1):
        duration = 2 * RC6_UNIT if number == 4 else RC6_UNIT
        _send_manchester_bit(sender, bool((data >> position) & 1), duration, True)


def send_rc6(sender: IRSender, address: int, command: int, repeats: int = 0, auto_toggle: bool = True) -> None:
    """Send an RC6 frame with mode 0; with ``auto_toggle`` the toggle bit alternates between calls."""
    raw = LongUnion.from_bytes(command, address, 0, 0)
    if auto_toggle and _send_toggle.flip():
        raw = raw.with_byte(2, 1)

    frames = repeats + 1
    for index in range(frames):
        # the leading bit is sent by send_rc6_raw
        send_rc6_raw(sender, raw.value, RC6_BITS - 1)
        if index < frames - 1:
            sender.delay(RC6_REPEAT_SPACE // 1000)


def decode_rc6(decoder: IRDecoder) -> IRData:
    """Decode an RC6 or RC6A frame from the decoder's buffer.

    Raises DecodeError if the buffer is no such frame.
    """
    if decoder.rawlen < 3:
        raise DecodeError(f"RC6: data length {decoder.rawlen} is too short")
    rawbuf = decoder.rawbuf
    if not decoder.match_mark(rawbuf[1], RC6_HEADER_MARK) or not decoder.match_space(rawbuf[2], RC6_HEADER_SPACE):
        raise DecodeError("RC6: header mark or space length is wrong")

    decoder.init_biphase_level(3, RC6_UNIT)
    if decoder.get_biphase_level() != MARK:
        raise DecodeError("RC6: first level of the leading bit is not a mark")
    if decoder.get_biphase_level() != SPACE:
        raise DecodeError("RC6: second level of the leading bit is not a space")

    value = 0
    bit_count = 0
    while decoder.biphase_offset < decoder.rawlen:
        is_toggle_bit = bit_count == 3
        start_level = decoder.get_biphase_level()
        if is_toggle_bit and start_level != decoder.get_biphase_level():
            raise DecodeError("RC6: toggle mark or space length is wrong")
        end_level = decoder.get_biphase_level()
        if is_toggle_bit and end_level != decoder.get_biphase_level():
            raise DecodeError("RC6: toggle mark or space length is wrong")

        if start_level == MARK and end_level == SPACE:
            value = (value << 1) | 1
        elif start_level == SPACE and end_level == MARK:
            value <<= 1
        else:
            raise DecodeError("RC6: no transition inside a bit")
        value &= _MASK32
        bit_count += 1

    union = LongUnion(value)
    data = decoder.decoded
    data.number_of_bits = bit_count
    data.decoded_raw_data = value

    if bit_count < RC6A_MIN_BITS:
        data.flags = IRFlags.IS_MSB_FIRST
        data.command = union.low_byte
        data.address = union.mid_low_byte
        if union.mid_high_byte & 1:
            data.flags = IRFlags.TOGGLE_BIT | IRFlags.IS_MSB_FIRST
    else:
        data.flags = IRFlags.IS_MSB_FIRST | IRFlags.EXTRA_INFO
        if union.mid_low_byte & 0x80:
            data.flags = IRFlags.TOGGLE_BIT | IRFlags.IS_MSB_FIRST | IRFlags.EXTRA_INFO
        data.command = union.low_byte
        data.address = union.mid_low_byte & 0x7F
        data.extra = union.high_word

    if rawbuf[0] < (RC6_REPEAT_SPACE + RC6_REPEAT_SPACE // 2) // MICROS_PER_TICK:
        data.flags |= IRFlags.IS_REPEAT

    data.protocol = Protocol.RC6
    return data


def send_rc5_raw(sender: IRSender, data: int, bits: int) -> None:
    """Send two start bits and then ``bits`` bits of ``data`` MSB first."""
    if bits < 0:
        raise ValueError(f"number of bits must not be negative: {bits}")
    sender.enable_ir_out(CARRIER_KHZ)
    sender.mark(RC5_UNIT)
    sender.space(RC5_UNIT)
    sender.mark(RC5_UNIT)
    for position in range(bits - 1, -1, -1):
        _send_manchester_bit(sender, bool((data >> position) & 1), RC5_UNIT, False)


def send_rc5ext(sender: IRSender, address: int, command: int, toggle: bool) -> None:
    """Send an RC5X frame with 5 address and 7 command bits.

    With ``toggle`` the toggle bit kept between calls is inverted first.
    """
    sender.enable_ir_out(CARRIER_KHZ)
    sender.mark(RC5_UNIT)

    # bit 6 of the command, sent inverted
    _send_manchester_bit(sender, not (command & 0x40), RC5_UNIT, False)

    if toggle:
        _rc5ext_toggle.flip()
    _send_manchester_bit(sender, _rc5ext_toggle.value, RC5_UNIT, False)

    for position in range(RC5_ADDRESS_BITS - 1, -1, -1):
        _send_manchester_bit(sender, bool((address >> position) & 1), RC5_UNIT, False)
    for position in range(RC5_COMMAND_BITS - 1, -1, -1):
        _send_manchester_bit(sender, bool((command >> position) & 1), RC5_UNIT, False)
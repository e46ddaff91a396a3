import pytest

from irproto import sony
from irproto.core import (
    MICROS_PER_TICK,
    REPEAT,
    DecodeError,
    IRDecoder,
    IRFlags,
    IRSender,
    Protocol,
)


def _rawbuf(sender, gap_ticks=2000):
    timings = sender.timings
    if len(timings) % 2 == 0:
        # a receiver does not see the trailing space
        timings = timings[:-1]
    return [gap_ticks] + [round(t / MICROS_PER_TICK) for t in timings]


def _sent(send, *args):
    sender = IRSender()
    send(sender, *args)
    return sender


@pytest.mark.parametrize(
    "address,command,bits",
    [(0x01, 0x15, 12), (0x1F, 0x7F, 12), (0x5A, 0x33, 15), (0x1A5, 0x01, 20), (0x0000, 0x00, 20)],
)
def test_round_trip(address, command, bits):
    sender = _sent(sony.send_sony, address, command, 0, bits)
    rawbuf = _rawbuf(sender)
    assert len(rawbuf) == 2 * bits + 2
    data = sony.decode_sony(IRDecoder(rawbuf))
    assert data.protocol == Protocol.SONY
    assert data.address == address
    assert data.command == command
    assert data.number_of_bits == bits


def test_carrier_frequency():
    assert _sent(sony.send_sony, 1, 2).frequency_khz == sony.SONY_CARRIER_KHZ


def test_long_gap_is_not_repeat():
    data = sony.decode_sony(IRDecoder(_rawbuf(_sent(sony.send_sony, 1, 2))))
    assert not data.flags & IRFlags.IS_REPEAT
    assert data.protocol == Protocol.SONY
    assert data.address == 1
    assert data.command == 2


def test_short_gap_is_repeat():
    data = sony.decode_sony(IRDecoder(_rawbuf(_sent(sony.send_sony, 1, 2), gap_ticks=100)))
    assert data.flags & IRFlags.IS_REPEAT
    assert data.command == 2


def test_repeats_send_whole_frames():
    sender = _sent(sony.send_sony, 1, 2, 2)
    headers = [s for s in sender.segments if s == (True, sony.SONY_HEADER_MARK)]
    assert len(headers) == 3


def test_too_few_bits_raise():
    with pytest.raises(ValueError):
        _sent(sony.send_sony, 1, 2, 0, 5)


def test_wrong_length_raises():
    rawbuf = _rawbuf(_sent(sony.send_sony, 1, 2))
    with pytest.raises(DecodeError):
        sony.decode_sony(IRDecoder(rawbuf[:-2]))


def test_wrong_header_raises():
    rawbuf = _rawbuf(_sent(sony.send_sony, 1, 2))
    rawbuf[1] = rawbuf[1] * 3
    with pytest.raises(DecodeError):
        sony.decode_sony(IRDecoder(rawbuf))


def test_empty_buffer_raises():
    with pytest.raises(DecodeError):
        sony.decode_sony(IRDecoder([]))


@pytest.mark.parametrize("value,bits", [(0xA90, 12), (0x7FFF, 15), (0x12345, 20)])
def test_msb_round_trip(value, bits):
    sender = _sent(sony.send_sony_msb, value, bits)
    result = sony.decode_sony_msb(IRDecoder(_rawbuf(sender)))
    assert result.value == value
    assert result.bits == bits
    assert result.decode_type == Protocol.SONY


def test_msb_short_gap_is_repeat():
    decoder = IRDecoder(_rawbuf(_sent(sony.send_sony_msb, 0xA90, 12), gap_ticks=5))
    result = sony.decode_sony_msb(decoder)
    assert result.value == REPEAT
    assert result.bits == 0
    assert decoder.decoded.flags == IRFlags.IS_REPEAT


def test_msb_too_short_raises():
    rawbuf = _rawbuf(_sent(sony.send_sony_msb, 0xA90, 12))
    with pytest.raises(DecodeError):
        sony.decode_sony_msb(IRDecoder(rawbuf[:20]))


def test_msb_bad_mark_raises():
    rawbuf = _rawbuf(_sent(sony.send_sony_msb, 0xA90, 12))
    rawbuf[5] = rawbuf[5] * 5
    with pytest.raises(DecodeError):
        sony.decode_sony_msb(IRDecoder(rawbuf))
import pytest

from irproto import nec
from irproto.core import (
    MICROS_PER_TICK,
    REPEAT,
    DecodeError,
    IRData,
    IRDecoder,
    IRFlags,
    IRSender,
    Protocol,
)


def _rawbuf(sender, gap_micros=10000):
    return [gap_micros // MICROS_PER_TICK] + [round(t / MICROS_PER_TICK) for t in sender.timings]


def _send(func, *args, **kwargs):
    sender = IRSender()
    func(sender, *args, **kwargs)
    return sender


def _decoder_for(func, *args, **kwargs):
    return IRDecoder(_rawbuf(_send(func, *args, **kwargs)))


def test_nec_8bit_address_round_trip():
    data = nec.decode_nec(_decoder_for(nec.send_nec, 0x04, 0x08))
    assert data.protocol == Protocol.NEC
    assert data.address == 0x04
    assert data.command == 0x08
    assert data.number_of_bits == nec.NEC_BITS
    assert data.flags == IRFlags.IS_LSB_FIRST


def test_nec_raw_data_contains_inverted_bytes():
    data = nec.decode_nec(_decoder_for(nec.send_nec, 0x04, 0x08))
    assert data.decoded_raw_data == 0xF708FB04


@pytest.mark.parametrize("address, command", [(0x00, 0x00), (0x7F, 0xFF), (0x1234, 0x45), (0xFFFF, 0x01)])
def test_nec_round_trip(address, command):
    data = nec.decode_nec(_decoder_for(nec.send_nec, address, command))
    assert (data.protocol, data.address, data.command) == (Protocol.NEC, address, command)


def test_frame_length_and_carrier():
    sender = _send(nec.send_nec, 0x10, 0x20)
    assert sender.frequency_khz == nec.NEC_CARRIER_KHZ
    assert len(_rawbuf(sender)) == nec.NEC_FRAME_LENGTH
    assert sender.timings[:2] == [nec.NEC_HEADER_MARK, nec.NEC_HEADER_SPACE]
    assert sender.timings[-1] == nec.NEC_BIT_MARK


def test_onkyo_round_trip():
    data = nec.decode_nec(_decoder_for(nec.send_onkyo, 0x1234, 0xABCD))
    assert data.protocol == Protocol.ONKYO
    assert data.address == 0x1234
    assert data.command == 0xABCD


def test_apple_round_trip():
    data = nec.decode_nec(_decoder_for(nec.send_apple, 0xD7, 0x05))
    assert data.protocol == Protocol.APPLE
    assert data.address == 0xD7
    assert data.command == 0x05
    assert data.decoded_raw_data & 0xFFFF == nec.APPLE_ADDRESS


def test_msb_code_is_bit_mirror_of_lsb_raw_data():
    data = nec.decode_nec(_decoder_for(nec.send_nec_msb, 0xCB340102, 32))
    assert data.decoded_raw_data == 0x40802CD3


def test_send_nec_raw_equals_msb_mirror():
    lsb = _send(nec.send_nec_raw, 0x40802CD3)
    msb = _send(nec.send_nec_msb, 0xCB340102, 32)
    assert lsb.timings == msb.timings


def test_decode_nec_msb_round_trip():
    result = nec.decode_nec_msb(_decoder_for(nec.send_nec_msb, 0xCB340102, 32))
    assert result.value == 0xCB340102
    assert result.bits == nec.NEC_BITS
    assert result.decode_type == Protocol.NEC


def test_repeat_frame_timings():
    expected = [nec.NEC_HEADER_MARK, nec.NEC_REPEAT_HEADER_SPACE, nec.NEC_BIT_MARK]
    assert _send(nec.send_nec, 0x04, 0x08, 0, True).timings == expected
    assert _send(nec.send_nec_repeat).timings == expected
    assert _send(nec.send_nec_msb, REPEAT, 32).timings == expected
    assert _send(nec.send_nec_msb, 0x1234, 32, True).timings == expected


def test_repeats_follow_in_raster():
    sender = _send(nec.send_nec, 0x04, 0x08, 2)
    frame = nec.NEC_FRAME_LENGTH - 1
    timings = sender.timings
    assert timings[frame] == nec.NEC_REPEAT_SPACE
    first_repeat = timings[frame + 1:frame + 4]
    assert first_repeat == [nec.NEC_HEADER_MARK, nec.NEC_REPEAT_HEADER_SPACE, nec.NEC_BIT_MARK]
    second_gap = timings[frame + 4]
    assert second_gap > nec.NEC_REPEAT_SPACE
    assert timings[frame + 5:] == first_repeat


def test_decode_repeat_uses_remembered_values():
    decoder = IRDecoder(_rawbuf(_send(nec.send_nec, 0x04, 0x08)))
    decoder.remember(nec.decode_nec(decoder))
    decoder.load(_rawbuf(_send(nec.send_nec_repeat)))
    data = nec.decode_nec(decoder)
    assert data.flags == IRFlags.IS_REPEAT | IRFlags.IS_LSB_FIRST
    assert (data.protocol, data.address, data.command) == (Protocol.NEC, 0x04, 0x08)


def test_decode_repeat_with_explicit_memory():
    decoder = IRDecoder(_rawbuf(_send(nec.send_nec_repeat)))
    decoder.remember(IRData(protocol=Protocol.APPLE, address=0xD7, command=0x05))
    data = nec.decode_nec(decoder)
    assert (data.protocol, data.address, data.command) == (Protocol.APPLE, 0xD7, 0x05)


def test_decode_nec_msb_repeat():
    decoder = IRDecoder(_rawbuf(_send(nec.send_nec_repeat)))
    result = nec.decode_nec_msb(decoder)
    assert result.value == REPEAT
    assert result.bits == 0
    assert decoder.decoded.protocol == Protocol.NEC
    assert decoder.decoded.flags & IRFlags.IS_REPEAT


def test_wrong_length_raises():
    buf = _rawbuf(_send(nec.send_nec, 0x04, 0x08))[:-2]
    with pytest.raises(DecodeError):
        nec.decode_nec(IRDecoder(buf))
    with pytest.raises(DecodeError):
        nec.decode_nec_msb(IRDecoder(buf))


def test_bad_header_space_raises():
    buf = _rawbuf(_send(nec.send_nec, 0x04, 0x08))
    buf[2] = 20
    with pytest.raises(DecodeError):
        nec.decode_nec(IRDecoder(buf))
    with pytest.raises(DecodeError):
        nec.decode_nec_msb(IRDecoder(buf))


def test_bad_header_mark_raises():
    buf = _rawbuf(_send(nec.send_nec, 0x04, 0x08))
    buf[1] = 40
    with pytest.raises(DecodeError):
        nec.decode_nec(IRDecoder(buf))


def test_bad_stop_bit_raises():
    buf = _rawbuf(_send(nec.send_nec, 0x04, 0x08))
    buf[-1] = 100
    with pytest.raises(DecodeError):
        nec.decode_nec(IRDecoder(buf))
    with pytest.raises(DecodeError):
        nec.decode_nec_msb(IRDecoder(buf))


def test_bad_repeat_space_raises():
    buf = _rawbuf(_send(nec.send_nec_repeat))
    buf[2] = 5
    with pytest.raises(DecodeError):
        nec.decode_nec(IRDecoder(buf))
    with pytest.raises(DecodeError):
        nec.decode_nec_msb(IRDecoder(buf))


def test_bad_data_space_raises():
    buf = _rawbuf(_send(nec.send_nec, 0x04, 0x08))
    buf[4] = 70
    with pytest.raises(DecodeError):
        nec.decode_nec(IRDecoder(buf))
    assert nec.decode_nec(IRDecoder(_rawbuf(_send(nec.send_nec, 0x04, 0x08)))).address == 0x04
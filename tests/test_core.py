import pytest

from irproto.core import (
    MARK,
    MICROS_PER_TICK,
    SPACE,
    DecodeError,
    IRData,
    IRDecoder,
    IRSender,
    Protocol,
)

GAP_TICKS = 200


def _to_rawbuf(timings):
    return [GAP_TICKS] + [round(t / MICROS_PER_TICK) for t in timings]


def test_timings_merge_and_drop_leading_space():
    sender = IRSender()
    sender.space(100)
    sender.mark(500)
    sender.space(200)
    sender.space(300)
    sender.mark(400)
    assert sender.timings == [500, 200 + 300, 400]
    assert sender.segments[0] == (False, 100)


def test_negative_duration_is_rejected():
    sender = IRSender()
    with pytest.raises(ValueError):
        sender.mark(-1)
    with pytest.raises(ValueError):
        sender.space(-5)


def test_delay_is_silence():
    sender = IRSender()
    sender.mark(100)
    sender.delay(5)
    sender.mark(100)
    assert sender.timings[1] == 5 * 1000


def test_enable_ir_out_and_clear():
    sender = IRSender()
    sender.enable_ir_out(38)
    sender.mark(9000)
    assert sender.frequency_khz == 38
    sender.clear()
    assert sender.frequency_khz is None
    assert sender.timings == []
    with pytest.raises(ValueError):
        sender.enable_ir_out(0)


def test_pulse_distance_lsb_first_with_stop_bit():
    sender = IRSender()
    sender.send_pulse_distance_width_data(700, 1600, 600, 500, 0b10, 2, False, True)
    assert sender.timings == [600, 500, 700, 1600, 600]


def test_pulse_distance_msb_first_without_stop_bit():
    sender = IRSender()
    sender.send_pulse_distance_width_data(700, 1600, 600, 500, 0b10, 2, True, False)
    assert sender.timings == [700, 1600, 600, 500]


@pytest.mark.parametrize("msb_first", [False, True])
@pytest.mark.parametrize("data", [0, 1, 0x12345678, 0xFFFFFFFF, 0x80000001])
def test_pulse_distance_round_trip(data, msb_first):
    sender = IRSender()
    sender.send_pulse_distance_width_data(560, 1680, 560, 560, data, 32, msb_first, True)
    decoder = IRDecoder(_to_rawbuf(sender.timings))
    assert decoder.decode_pulse_distance_data(32, 1, 560, 1680, 560, msb_first) == data
    assert decoder.decoded.decoded_raw_data == data


@pytest.mark.parametrize("data", [0, 0x5A5, 0xFFF, 0x001])
def test_pulse_width_round_trip(data):
    sender = IRSender()
    sender.send_pulse_distance_width_data(1200, 600, 600, 600, data, 12, False, False)
    timings = sender.timings[:-1]  # the last space is never recorded
    decoder = IRDecoder(_to_rawbuf(timings))
    assert decoder.decode_pulse_width_data(12, 1, 1200, 600, 600, False) == data


def test_match_mark_and_space():
    decoder = IRDecoder()
    assert decoder.match_mark(11, 560)
    assert not decoder.match_mark(30, 560)
    assert decoder.match_space(34, 1690)
    assert not decoder.match_space(11, 1690)


def test_pulse_distance_short_buffer_raises():
    decoder = IRDecoder([GAP_TICKS, 11, 11])
    with pytest.raises(DecodeError):
        decoder.decode_pulse_distance_data(2, 1, 560, 1690, 560)


def test_pulse_distance_bad_space_raises():
    decoder = IRDecoder([GAP_TICKS, 11, 60])
    with pytest.raises(DecodeError):
        decoder.decode_pulse_distance_data(1, 1, 560, 1690, 560)


def test_pulse_width_bad_mark_raises():
    decoder = IRDecoder([GAP_TICKS, 80, 12, 12])
    with pytest.raises(DecodeError):
        decoder.decode_pulse_width_data(2, 1, 1200, 600, 600)


def test_biphase_levels_follow_manchester_code():
    sender = IRSender()
    sender.send_biphase_data(889, 0b101, 3)
    decoder = IRDecoder(_to_rawbuf(sender.timings))
    decoder.init_biphase_level(1, 889)
    assert decoder.get_biphase_level() == MARK
    levels = [decoder.get_biphase_level() for _ in range(6)]
    assert levels == [SPACE, MARK, MARK, SPACE, SPACE, MARK]
    assert decoder.biphase_offset == decoder.rawlen
    assert decoder.get_biphase_level() == SPACE


def test_biphase_bad_timing_raises():
    decoder = IRDecoder([GAP_TICKS, 200])
    decoder.init_biphase_level(1, 889)
    with pytest.raises(DecodeError):
        decoder.get_biphase_level()


def test_remember_and_load():
    decoder = IRDecoder([GAP_TICKS, 11])
    decoder.decoded.command = 7
    decoder.remember(IRData(protocol=Protocol.NEC, address=5, command=7))
    decoder.load([GAP_TICKS])
    assert (decoder.last_address, decoder.last_command, decoder.last_protocol) == (5, 7, Protocol.NEC)
    assert decoder.decoded == IRData()
    assert decoder.rawlen == 1


def test_negative_ticks_rejected():
    with pytest.raises(ValueError):
        IRDecoder([GAP_TICKS, -3])
# irproto

Pure-Python encoders and decoders for common infrared remote-control
protocols. Everything works on timing data: a sender records the marks
(carrier on), spaces (carrier off) and delays that make up a frame, and a
decoder takes a buffer of measured durations and turns it back into
protocol, address and command.

Supported protocols:

- NEC with 8- or 16-bit address, Apple and Onkyo (`irproto.nec`)
- RC5 / RC5X and RC6 / RC6A (`irproto.rc5_rc6`)
- Samsung32 and Samsung48 (`irproto.samsung`)
- Sony SIRCS with 12, 15 or 20 bits (`irproto.sony`)

Each protocol module also has MSB-first "legacy" functions
(`send_nec_msb`, `decode_nec_msb`, `send_samsung_msb`, `decode_samsung_msb`,
`send_sony_msb`, `decode_sony_msb`, `send_rc5_raw`, `send_rc5ext`) that
work with a single raw code value and return a `LegacyResult`.

## Installation

```
pip install irproto
```

## Sending

```python
from irproto.core import IRSender
from irproto.nec import send_nec

sender = IRSender()
send_nec(sender, 0x04, 0x08)
print(sender.frequency_khz)   # 38
print(sender.timings)         # [9000, 4480, 560, 560, ...] in microseconds
```

`IRSender` merges neighbouring intervals of the same kind, so a delay after
a trailing space simply lengthens that space. `segments` gives every
interval as `(is_mark, micros)`, `timings` the alternating durations from
the first mark on. `clear()` empties the sender for the next frame.

Repeats are requested with the `repeats` argument; `delay()` only records
the silence between frames, it does not sleep.

RC5 and RC6 senders keep their toggle bit between calls when
`auto_toggle` is true (the default); both share the same toggle state.

## Decoding

The decoder works on ticks of `irproto.core.MICROS_PER_TICK` (50 µs).
`rawbuf[0]` is the gap before the frame, then marks and spaces alternate.

```python
from irproto.core import MICROS_PER_TICK, IRDecoder, DecodeError
from irproto.nec import decode_nec

rawbuf = [2000] + [round(t / MICROS_PER_TICK) for t in sender.timings]
decoder = IRDecoder(rawbuf)
try:
    data = decode_nec(decoder)
except DecodeError as error:
    print("not NEC:", error)
else:
    print(data.protocol.name, hex(data.address), hex(data.command))
    decoder.remember(data)   # needed so a later repeat frame gets address and command
```

Decoders return an `IRData` (protocol, address, command, extra,
number_of_bits, flags, decoded_raw_data) and raise `DecodeError` when the
buffer does not fit the protocol. `IRDecoder.load()` puts a new buffer in
place and resets the previous results, while keeping what `remember()`
stored. Flags are `IRFlags` values such as `IS_REPEAT`, `TOGGLE_BIT`,
`PARITY_FAILED` and `EXTRA_INFO`.

## Tiny NEC receiver

`irproto.tiny_receiver.TinyIRReceiver` is an NEC-only state machine. Call
`handle_change(level, micros)` on every edge of the (active-low) input
signal; it returns the new `ReceiverState`. When a complete frame or
repeat has been seen it calls your callback with
`(address, command, is_repeat)`. No parity check is done; an 8-bit address
followed by its inverse is reported as the 8-bit address.

```python
from irproto.tiny_receiver import TinyIRReceiver

receiver = TinyIRReceiver(lambda address, command, repeat: print(address, command, repeat))
```

## Feedback LED

`irproto.feedback_led.FeedbackLED` switches an indicator pin through two
callbacks you supply: `write_pin(pin, level)` and `set_output(pin)`. Pin 0
means the built-in LED given as `builtin_pin`; `active_low` inverts the
level. `configure()`, `enable()`, `disable()` and `set(on)` control it.
A `FeedbackLED` can be passed to `TinyIRReceiver` to follow the input.

## What this package does not do

- It does not touch hardware: there is no timer, interrupt, pin access or
  carrier generation. Sending produces a list of timings; receiving needs
  timings or edges you supply.
- There is no automatic protocol detection: call the decoder for the
  protocol you expect, or try several in turn.
- `Protocol` also lists Denon, JVC, LG, Kaseikyo, Sharp, Bose Wave and
  others, but there are no encoders or decoders for them here.
- There is no command-line tool.

## Running the tests

```
pip install irproto[test]
pytest
```
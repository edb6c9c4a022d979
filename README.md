# roverctl

Control and telemetry logic for a small four-wheeled rover. It is written as
plain Python, so it can be tested and run away from the vehicle. Every piece
is a library object that you feed with readings and that returns values.
Nothing in the package runs on its own.

## Modules

- `roverctl.pid`: `PidController(kp, ki, kd, max_output, max_integral)`.
  - `calc(target, current)` returns the output, clamped to `max_output`. The
    integral is clamped to `max_integral`, and a target of exactly zero clears
    it first.
  - `reset()` forgets the error history and the integral.
- `roverctl.drive`: differential-drive control.
  - `DriveController` holds the navigation state machine (`NavState`: `IDLE`,
    `INIT`, `TURN`, `STRAIGHT`, `STOP`).
  - `request_navigation(x, y)` sets a target in centimetres, with x to the
    right and y ahead. The run starts on the next `step` once the controller
    is idle.
  - `step(yaw, yaw_rate, encoder_totals, gamepad=None)` returns the desired
    RPM for the four wheels as (left, left, right, right). When idle and a
    connected `GamepadState` is given, the right stick drives.
  - `SlewLimiter` limits how fast each channel's target may change.
  - `WheelSpeedLoop.update(target_rpm, delta_pulses, dt)` filters the encoder
    speed and returns a PWM duty in -1000..1000 (feed-forward plus PID).
  - Helpers: `wrap_angle`, which brings degrees into -180..180;
    `mix(forward, turn)`, which returns clamped (left, right) RPM; and
    `gamepad_command(right_x, right_y)`, which applies a dead band round
    the centre.
- `roverctl.gamepad`: decodes USB HID reports from a PS2-style receiver.
  - `decode_buttons(report)` returns a `Button` flag mask.
  - `button_names(buttons)` lists the pressed buttons in display order.
  - `GamepadLink` tracks connection through `UsbEvent` values. Its
    `apply_report(report)` fills a `GamepadState` while the pad is connected.
- `roverctl.wifi`: the Wi-Fi command link.
  - `SocketReportParser.feed(byte)` / `feed_bytes(data)` parse
    `+SKTRPT=<socket>,<len>,...\n...\n<data>` reports into `Packet` objects.
    Payloads are capped at 1023 bytes.
  - `parse_nav_command(payload)` reads `NAV:x,y`.
  - `handle_payload(payload)` returns a `Reply`. For a navigation command it
    holds an `ACK_NAV:x,y` acknowledgement and the target. For anything else
    it echoes the payload back.
  - `WifiStatus` enumerates the connection states.
- `roverctl.telemetry`: sensor logging.
  - `Sample` is one snapshot of attitude, optical flow and lidar.
  - `ChangeLogger.offer(sample, tick)` returns a formatted record only when
    three things hold: the sample is valid, it changed past its thresholds,
    and the interval (100 ticks by default) has passed.
  - `format_record(tick, sample)` renders one line, cut to 127 characters.
  - `LogQueue` is a bounded FIFO (10 lines by default) that drops new lines
    when full. `save_pending(save_line)` hands queued lines to a callable.
- `roverctl.views`: text for the monitor screens, with `#RRGGBB ...#` colour
  tags. The functions are `format_attitude`, `format_flow`, `format_lidar`,
  `format_imu`, `format_motors`, `format_gamepad`, `format_wifi_status` and
  `format_gain`.
- `roverctl.screens`: page logic for the on-board display.
  - `Navigator` switches between the `Page` values; `back()` always returns
    to `Page.MAIN`.
  - `LogPager` pages backwards through a log in steps of 511 characters. It
    reads through a `read_page(size, offset)` callable that you supply.
  - `NavPanel` provides the target sliders and the start button.
  - `PidTuner` provides gain sliders in steps of 0.1.
  - `WifiConsole` provides the connect button and status line. Its log takes
    at most 20 bytes per `tick()`.
- `roverctl.ring_buffer`: `RingBuffer(capacity)`, a byte FIFO.
  - Writes past capacity drop the oldest bytes.
  - A single write longer than the capacity raises `ValueError`.
  - Reading an empty buffer raises `BufferEmptyError`.
- `roverctl.lfsutil`: 32-bit helpers (`npw2`, `ctz`, `popc`, `align_down`,
  `align_up`, `scmp`, `from_le32`, `to_le32`, `from_be32`, `to_be32`) and the
  nibble-table CRC-32 `crc(crc, data)`.

## Examples

```python
from roverctl.wifi import SocketReportParser, handle_payload

parser = SocketReportParser()
for packet in parser.feed_bytes(b"+SKTRPT=0,10,10.0.0.2,8888\r\n\r\nNAV:30,120"):
    reply = handle_payload(packet.payload)
    print(reply.data, reply.target)   # b'ACK_NAV:30.0,120.0\r\n' (30.0, 120.0)
```

```python
from roverctl.ring_buffer import RingBuffer

ring = RingBuffer(4)
ring.write(b"abc")
ring.write(b"def")
assert ring.read(10) == b"cdef"
```

## What it does not do

The package holds the decision logic only. It does not do any of the
following:

- talk to motors, encoders, the IMU, the USB host or the Wi-Fi module;
- draw anything on a screen;
- store the flight log anywhere. `LogQueue.save_pending` and `LogPager` take
  callables that you supply for writing and reading lines;
- provide a command-line program or a run loop. You call `step`, `feed`,
  `offer` and `tick` yourself with readings and timestamps.

## Tests

```
pip install -e .[test]
pytest
```
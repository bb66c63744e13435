# canlink

canlink is a pair of small command-line tools for exercising a CAN bus through Linux SocketCAN. It also exposes the pieces they are made from as a library.

- **`canlink-raw`** opens a raw CAN socket. Every `--interval` seconds (default 1) it sends a message, by default `hello world hello can`, split into frames of at most 8 bytes with ID `0x123`. Alongside that it prints each frame it receives. By default only standard frames with ID `0x123` are let through.
- **`canlink-isotp`** opens an ISO-TP socket that sends on TX ID `0x7E0` and listens on RX ID `0x7E8`. Flow control is set to block size 8, STmin 5 ms and no wait frames. Every `--interval` seconds it sends a test payload of `--size` bytes (default 100, counting up from `0x00`). It prints each message it receives. For both sent and received messages only the first 16 bytes are shown.

At startup both tools run `sudo ip link set <interface> type can bitrate <bitrate>` and `sudo ip link set <interface> up`. On exit they run `sudo ip link set <interface> down`. Failures of these commands are ignored. If the socket cannot be opened, the tool brings the interface down and exits with status 1. Ctrl+C or SIGTERM stops the loops. The interface is then brought down, and the tool exits with status 0.

## Requirements

- Linux with SocketCAN and a CAN interface, for example `can0`.
- For ISO-TP, the `can-isotp` kernel module (`sudo modprobe can-isotp`).
- `sudo` rights for `ip link`.
- Python 3.10 or later. The package has no third-party dependencies.

## Installation

```
pip install .
```

## Usage

```
canlink-raw
canlink-isotp
```

Options of `canlink-raw`:

| Option | Default | Meaning |
| --- | --- | --- |
| `-i`, `--interface` | `can0` | CAN interface |
| `--bitrate` | `100000` | bitrate set on the interface |
| `--can-id` | `0x123` | ID of the frames sent |
| `--filter-id` | `0x123` | standard ID accepted on receive |
| `--no-filter` | off | receive all frames |
| `--blocking` | off | read with blocking reads instead of `select` |
| `--message` | `hello world hello can` | text sent each round |
| `--interval` | `1.0` | seconds between rounds |

Options of `canlink-isotp`:

| Option | Default | Meaning |
| --- | --- | --- |
| `-i`, `--interface` | `can0` | CAN interface |
| `--bitrate` | `100000` | bitrate set on the interface |
| `--tx-id` | `0x7E0` | ISO-TP transmit ID |
| `--rx-id` | `0x7E8` | ISO-TP receive ID |
| `--size` | `100` | size of the test payload |
| `--interval` | `1.0` | seconds between sends |

IDs can be given in decimal or with a `0x` prefix. `candump can0` is a handy way to watch the traffic.

## Library use

```python
from canlink.frames import CanFrame, unpack_frame, chunk_payload, format_bytes
from canlink.netif import bring_up, bring_down
from canlink.raw import RawCanLink, open_raw_socket, send_frame, receive_frame
from canlink.isotp import IsoTpLink, FlowControlOptions, open_isotp_socket, make_test_payload

frame = CanFrame(0x123, b"hello")
wire = frame.pack()              # 16-byte Linux can_frame
assert unpack_frame(wire) == frame
print(frame.describe())          # ID=0x123, DLC=5, Data=0x68 0x65 0x6C 0x6C 0x6F

list(chunk_payload(b"hello world"))   # [b'hello wo', b'rld']
format_bytes(make_test_payload(4))    # '0x00 0x01 0x02 0x03'
```

- `CanFrame` rejects more than 8 data bytes and IDs outside 32 bits.
- `unpack_frame` raises `ValueError` for input that is not exactly 16 bytes.
- `bring_up` and `bring_down` accept a `runner` callable in place of running the commands. They return the command lines.
- `RawCanLink` and `IsoTpLink` take an open socket. `run()` blocks until `stop()` is called.

## What it does not do

canlink handles classic CAN frames only, with up to 8 data bytes; there is no CAN FD. The ISO-TP tool sends a fixed counting payload and prints what arrives. It does not interpret diagnostic (UDS) messages. Nothing is logged or stored beyond what is printed to the terminal.

## Tests

```
pip install .[test]
pytest
```
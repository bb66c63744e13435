"""ISO-TP (CAN transport protocol) link: send a multi-frame message periodically."""

from __future__ import annotations

import argparse
import signal
import socket
import struct
import sys
import threading
from dataclasses import dataclass
from typing import TextIO

from .frames import format_bytes
from .netif import DEFAULT_BITRATE, DEFAULT_INTERFACE, bring_down, bring_up

CAN_ISOTP = getattr(socket, "CAN_ISOTP", 6)
SOL_CAN_ISOTP = 100 + CAN_ISOTP
CAN_ISOTP_RECV_FC = 2
MAX_PAYLOAD = 4095
RECEIVE_BUFFER_SIZE = 1 << 20
DEFAULT_TX_ID = 0x7E0
DEFAULT_RX_ID = 0x7E8
PREVIEW_BYTES = 16


@dataclass(frozen=True)
class FlowControlOptions:
    """Flow control parameters sent by the receiver: block size, STmin (ms), max wait frames."""

    bs: int = 8
    stmin: int = 5
    wftmax: int = 0

    def __post_init__(self) -> None:
        for name in ("bs", "stmin", "wftmax"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} must fit in one byte, got {value}")

    def pack(self) -> bytes:
        """Encode as the kernel's ``can_isotp_fc_options``."""
        return struct.pack("=BBB", self.bs, self.stmin, self.wftmax)


def make_test_payload(size: int = 100) -> bytes:
    """Return ``size`` bytes counting up from 0x00, wrapping at 0xFF."""
    if size < 0:
        raise ValueError("payload size must not be negative")
    return bytes(i & 0xFF for i in range(size))


def open_isotp_socket(
    ifname: str = DEFAULT_INTERFACE,
    tx_id: int = DEFAULT_TX_ID,
    rx_id: int = DEFAULT_RX_ID,
    fc: FlowControlOptions | None = None,
) -> socket.socket:
    """Open an ISO-TP socket on ``ifname`` sending on ``tx_id`` and listening on ``rx_id``."""
    family = getattr(socket, "AF_CAN", None)
    if family is None:
        raise OSError("CAN sockets are not supported on this platform")
    sock = socket.socket(family, socket.SOCK_DGRAM, CAN_ISOTP)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, RECEIVE_BUFFER_SIZE)
        sock.setsockopt(SOL_CAN_ISOTP, CAN_ISOTP_RECV_FC, (fc or FlowControlOptions()).pack())
        sock.bind((ifname, rx_id, tx_id))
    except BaseException:
        sock.close()
        raise
    return sock


class IsoTpLink:
    """Sends ``payload`` every ``interval`` seconds and prints messages received."""

    def __init__(
        self,
        sock: socket.socket,
        payload: bytes | None = None,
        interval: float = 1.0,
        out: TextIO | None = None,
    ) -> None:
        self.sock = sock
        self.payload = make_test_payload() if payload is None else bytes(payload)
        if len(self.payload) > MAX_PAYLOAD:
            raise ValueError(f"ISO-TP payload is limited to {MAX_PAYLOAD} bytes")
        self.interval = interval
        self.out = out
        self._stopped = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def _say(self, text: str) -> None:
        print(text, file=self.out if self.out is not None else sys.stdout, flush=True)

    def send_loop(self) -> None:
        while self.running:
            try:
                self.sock.send(self.payload)
            except OSError as exc:
                print(f"Failed to send CAN-TP message: {exc}", file=sys.stderr)
            else:
                preview = format_bytes(self.payload, PREVIEW_BYTES)
                self._say(f"Sent CAN-TP message ({len(self.payload)} bytes): {preview} ...")
            self._stopped.wait(self.interval)

    def receive_loop(self) -> None:
        while self.running:
            try:
                data = self.sock.recv(MAX_PAYLOAD)
            except OSError:
                continue
            if data:
                preview = format_bytes(data, PREVIEW_BYTES)
                self._say(f"Received CAN-TP message ({len(data)} bytes): {preview} ...")

    def run(self) -> None:
        """Run the send and receive loops until :meth:`stop` is called."""
        threads = [
            threading.Thread(target=self.send_loop, name="isotp-send", daemon=True),
            threading.Thread(target=self.receive_loop, name="isotp-receive", daemon=True),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def stop(self) -> None:
        self._stopped.set()


def _int_auto(text: str) -> int:
    return int(text, 0)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send and receive ISO-TP messages.")
    parser.add_argument("-i", "--interface", default=DEFAULT_INTERFACE)
    parser.add_argument("--bitrate", type=int, default=DEFAULT_BITRATE)
    parser.add_argument("--tx-id", type=_int_auto, default=DEFAULT_TX_ID)
    parser.add_argument("--rx-id", type=_int_auto, default=DEFAULT_RX_ID)
    parser.add_argument("--size", type=int, default=100, help="test payload size")
    parser.add_argument("--interval", type=float, default=1.0)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    print(f"Setting up CAN interface: {args.interface}", flush=True)
    bring_up(args.interface, args.bitrate)
    try:
        sock = open_isotp_socket(args.interface, args.tx_id, args.rx_id)
    except OSError as exc:
        print(f"Failed to open ISO-TP socket: {exc}", file=sys.stderr)
        bring_down(args.interface)
        return 1

    # Wake the blocking receive periodically so a stop request is noticed.
    sock.settimeout(1.0)
    link = IsoTpLink(sock, make_test_payload(args.size), interval=args.interval)
    handlers = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        for sig in handlers:
            signal.signal(sig, lambda *_: link.stop())
        with sock:
            link.run()
    finally:
        for sig, handler in handlers.items():
            signal.signal(sig, handler)
    bring_down(args.interface)
    print("CAN-TP communication stopped", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
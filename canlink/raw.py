"""Raw CAN link: periodically send a message in frames and print frames received."""

from __future__ import annotations

import argparse
import select
import signal
import socket
import sys
import threading
from typing import TextIO

from .frames import CAN_FRAME_SIZE, CAN_SFF_MASK, CanFrame, chunk_payload, unpack_frame
from .netif import DEFAULT_BITRATE, DEFAULT_INTERFACE, bring_down, bring_up

RECEIVE_BUFFER_SIZE = 1 << 20
DEFAULT_CAN_ID = 0x123
DEFAULT_MESSAGE = b"hello world hello can"


def _can_family() -> int:
    family = getattr(socket, "AF_CAN", None)
    if family is None:
        raise OSError("CAN sockets are not supported on this platform")
    return family


def open_raw_socket(
    ifname: str = DEFAULT_INTERFACE,
    filter_id: int | None = DEFAULT_CAN_ID,
    loopback: bool = False,
) -> socket.socket:
    """Open a raw CAN socket bound to ``ifname``.

    With ``filter_id`` set, only standard frames with that id are received;
    with ``None`` all frames are. Raises OSError on any failure.
    """
    sock = socket.socket(_can_family(), socket.SOCK_RAW, socket.CAN_RAW)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, RECEIVE_BUFFER_SIZE)
        sock.bind((ifname,))
        if filter_id is not None:
            rule = CanFrame(filter_id).can_id.to_bytes(4, sys.byteorder) + CAN_SFF_MASK.to_bytes(
                4, sys.byteorder
            )
            sock.setsockopt(socket.SOL_CAN_RAW, socket.CAN_RAW_FILTER, rule)
        else:
            sock.setsockopt(socket.SOL_CAN_RAW, socket.CAN_RAW_FILTER, None, 0)
        sock.setsockopt(socket.SOL_CAN_RAW, socket.CAN_RAW_LOOPBACK, int(loopback))
    except BaseException:
        sock.close()
        raise
    return sock


def send_frame(sock: socket.socket, can_id: int, data: bytes, out: TextIO | None = None) -> CanFrame:
    """Send ``data`` (truncated to eight bytes) as one frame and report it."""
    frame = CanFrame(can_id, bytes(data)[:8])
    print(f"Sending CAN frame: {frame.describe()}", file=out or sys.stdout, flush=True)
    sent = sock.send(frame.pack())
    if sent != CAN_FRAME_SIZE:
        raise OSError(f"Failed to send CAN frame: {sent} of {CAN_FRAME_SIZE} bytes written")
    return frame


def receive_frame(sock: socket.socket, out: TextIO | None = None) -> CanFrame:
    """Read one frame, report it and return it; ValueError if it is incomplete."""
    frame = unpack_frame(sock.recv(CAN_FRAME_SIZE))
    print(f"Received CAN frame: {frame.describe()}", file=out or sys.stdout, flush=True)
    return frame


class RawCanLink:
    """Sends a message every ``interval`` seconds and prints frames as they arrive."""

    def __init__(
        self,
        sock: socket.socket,
        can_id: int = DEFAULT_CAN_ID,
        message: bytes = DEFAULT_MESSAGE,
        interval: float = 1.0,
        blocking: bool = False,
        poll_timeout: float = 1.0,
        out: TextIO | None = None,
    ) -> None:
        self.sock = sock
        self.can_id = can_id
        self.message = bytes(message)
        self.interval = interval
        self.blocking = blocking
        self.poll_timeout = poll_timeout
        self.out = out
        self._stopped = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def _say(self, text: str) -> None:
        print(text, file=self.out if self.out is not None else sys.stdout, flush=True)

    def send_loop(self) -> None:
        while self.running:
            for chunk in chunk_payload(self.message):
                if not self.running:
                    break
                try:
                    send_frame(self.sock, self.can_id, chunk, self.out)
                except OSError as exc:
                    print(f"Failed to send CAN frame: {exc}", file=sys.stderr)
                    self._say("Send error in thread, continuing")
            self._stopped.wait(self.interval)

    def _receive_one(self) -> None:
        try:
            receive_frame(self.sock, self.out)
        except (OSError, ValueError) as exc:
            print(f"Failed to receive CAN frame: {exc}", file=sys.stderr)
        else:
            self._say("Successfully received a frame")

    def receive_loop(self) -> None:
        while self.running:
            if self.blocking:
                self._receive_one()
                self._stopped.wait(0.01)
                continue
            try:
                ready, _, _ = select.select([self.sock], [], [], self.poll_timeout)
            except (OSError, ValueError) as exc:
                print(f"Select error in receive thread: {exc}", file=sys.stderr)
                self._stopped.wait(self.poll_timeout)
                continue
            if ready:
                self._receive_one()

    def run(self) -> None:
        """Run the send and receive loops until :meth:`stop` is called."""
        threads = [
            threading.Thread(target=self.send_loop, name="can-send", daemon=True),
            threading.Thread(target=self.receive_loop, name="can-receive", daemon=True),
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
    parser = argparse.ArgumentParser(description="Send and receive raw CAN frames.")
    parser.add_argument("-i", "--interface", default=DEFAULT_INTERFACE)
    parser.add_argument("--bitrate", type=int, default=DEFAULT_BITRATE)
    parser.add_argument("--can-id", type=_int_auto, default=DEFAULT_CAN_ID)
    parser.add_argument("--filter-id", type=_int_auto, default=DEFAULT_CAN_ID)
    parser.add_argument("--no-filter", action="store_true", help="receive all frames")
    parser.add_argument("--blocking", action="store_true", help="use blocking reads")
    parser.add_argument("--message", default=DEFAULT_MESSAGE.decode())
    parser.add_argument("--interval", type=float, default=1.0)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    print(f"Setting up CAN interface: {args.interface}", flush=True)
    bring_up(args.interface, args.bitrate)
    try:
        sock = open_raw_socket(args.interface, None if args.no_filter else args.filter_id)
    except OSError as exc:
        print(f"Failed to open CAN socket: {exc}", file=sys.stderr)
        bring_down(args.interface)
        return 1

    link = RawCanLink(
        sock,
        can_id=args.can_id,
        message=args.message.encode(),
        interval=args.interval,
        blocking=args.blocking,
    )
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
    print("CAN communication stopped", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
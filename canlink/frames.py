"""Classic CAN frames in the Linux ``struct can_frame`` layout."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass

CAN_MAX_DLEN = 8
CAN_SFF_MASK = 0x7FF
_FRAME_FORMAT = struct.Struct("=IB3x8s")
CAN_FRAME_SIZE = _FRAME_FORMAT.size


@dataclass(frozen=True)
class CanFrame:
    """A classic CAN frame with at most eight data bytes."""

    can_id: int
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) > CAN_MAX_DLEN:
            raise ValueError(f"CAN frame carries at most {CAN_MAX_DLEN} bytes, got {len(self.data)}")
        if not 0 <= self.can_id <= 0xFFFFFFFF:
            raise ValueError(f"CAN id out of range: {self.can_id:#x}")

    @property
    def dlc(self) -> int:
        return len(self.data)

    def pack(self) -> bytes:
        """Encode the frame as the kernel's 16-byte ``can_frame``."""
        return _FRAME_FORMAT.pack(self.can_id, self.dlc, self.data)

    def describe(self) -> str:
        """Return a line such as ``ID=0x123, DLC=2, Data=0x01 0x02``."""
        return f"ID=0x{self.can_id:X}, DLC={self.dlc}, Data={format_bytes(self.data)}"


def unpack_frame(data: bytes) -> CanFrame:
    """Decode a 16-byte ``can_frame``; raise ValueError if it is incomplete."""
    if len(data) != CAN_FRAME_SIZE:
        raise ValueError(f"Incomplete CAN frame received: {len(data)} bytes")
    can_id, dlc, payload = _FRAME_FORMAT.unpack(data)
    if dlc > CAN_MAX_DLEN:
        raise ValueError(f"Invalid CAN frame length: {dlc}")
    return CanFrame(can_id, payload[:dlc])


def chunk_payload(data: bytes, size: int = CAN_MAX_DLEN) -> Iterator[bytes]:
    """Yield consecutive pieces of ``data`` of at most ``size`` bytes."""
    if size <= 0:
        raise ValueError("chunk size must be positive")
    view = bytes(data)
    for offset in range(0, len(view), size):
        yield view[offset:offset + size]


def format_bytes(data: bytes, limit: int | None = None) -> str:
    """Render bytes as space separated ``0xNN`` values, optionally only the first ``limit``."""
    shown = bytes(data) if limit is None else bytes(data)[:limit]
    return " ".join(f"0x{byte:02X}" for byte in shown)
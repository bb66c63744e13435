"""Bring a SocketCAN network interface up or down with ``ip link``."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence

Runner = Callable[[Sequence[str]], object]

DEFAULT_INTERFACE = "can0"
DEFAULT_BITRATE = 100000


def _run_quietly(command: Sequence[str]) -> None:
    """Run a command, ignoring its exit status and a missing executable."""
    try:
        subprocess.run(list(command), check=False)
    except OSError:
        pass


def bring_up(
    ifname: str = DEFAULT_INTERFACE,
    bitrate: int = DEFAULT_BITRATE,
    runner: Runner | None = None,
) -> list[list[str]]:
    """Configure the bitrate of ``ifname`` and set it up.

    Returns the commands that were handed to ``runner``.
    """
    run = runner or _run_quietly
    commands = [
        ["sudo", "ip", "link", "set", ifname, "type", "can", "bitrate", str(bitrate)],
        ["sudo", "ip", "link", "set", ifname, "up"],
    ]
    for command in commands:
        run(command)
    return commands


def bring_down(ifname: str = DEFAULT_INTERFACE, runner: Runner | None = None) -> list[list[str]]:
    """Set ``ifname`` down. Returns the commands that were handed to ``runner``."""
    run = runner or _run_quietly
    commands = [["sudo", "ip", "link", "set", ifname, "down"]]
    for command in commands:
        run(command)
    return commands
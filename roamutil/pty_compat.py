"""Start a child process on a new pseudo-terminal, and raw terminal modes."""

from __future__ import annotations

import fcntl
import os
import struct
import sys
import termios
from dataclasses import dataclass

__all__ = ["WindowSize", "forkpty", "cfmakeraw"]

_WINSIZE_FORMAT = "HHHH"


@dataclass(frozen=True)
class WindowSize:
    """Terminal dimensions in character cells and pixels."""

    rows: int
    cols: int
    xpixel: int = 0
    ypixel: int = 0


# A window size must be set, or reading it back from the terminal fails.
_DEFAULT_WINDOW = WindowSize(rows=25, cols=80)


def _set_window_size(fd: int, size: WindowSize) -> None:
    packed = struct.pack(_WINSIZE_FORMAT, size.rows, size.cols, size.xpixel, size.ypixel)
    fcntl.ioctl(fd, termios.TIOCSWINSZ, packed)


def _become_child(master: int, slave: int, slave_name: str) -> None:
    """Make the terminal the child's controlling tty and standard streams."""
    try:
        os.setsid()
    except OSError as exc:
        sys.stderr.write(f"setsid: {exc.strerror}\n")
    try:
        if hasattr(termios, "TIOCSCTTY"):
            fcntl.ioctl(slave, termios.TIOCSCTTY, 0)
        else:
            os.close(os.open(slave_name, os.O_RDWR))
    except OSError as exc:
        sys.stderr.write(f"controlling terminal: {exc.strerror}\n")
        sys.stderr.flush()
        os._exit(1)
    os.close(master)
    for target in (0, 1, 2):
        os.dup2(slave, target)
    if slave > 2:
        os.close(slave)


def forkpty(termp: list | None = None, winp: WindowSize | None = None) -> tuple[int, int]:
    """Fork a child whose standard streams are a new pseudo-terminal.

    *termp* is a termios attribute list as returned by termios.tcgetattr,
    applied to the terminal if given; *winp* sets its size (80x25 if not
    given). Returns (pid, master_fd) in the parent and (0, -1) in the child.
    Raises OSError if the terminal cannot be set up or the fork fails.
    """
    master, slave = os.openpty()
    try:
        if termp is not None:
            termios.tcsetattr(slave, termios.TCSAFLUSH, termp)
        _set_window_size(slave, winp if winp is not None else _DEFAULT_WINDOW)
        slave_name = os.ttyname(slave)
        pid = os.fork()
    except BaseException:
        os.close(slave)
        os.close(master)
        raise

    if pid == 0:
        _become_child(master, slave, slave_name)
        return 0, -1

    os.close(slave)
    return pid, master


def cfmakeraw(attrs: list) -> list:
    """Return a copy of termios *attrs* set for raw, byte-at-a-time input."""
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(
        termios.IGNBRK
        | termios.BRKINT
        | termios.PARMRK
        | termios.ISTRIP
        | termios.INLCR
        | termios.IGNCR
        | termios.ICRNL
        | termios.IXON
    )
    oflag &= ~termios.OPOST
    lflag &= ~(termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN)
    cflag &= ~(termios.CSIZE | termios.PARENB)
    cflag |= termios.CS8

    cc = list(cc)
    cc[termios.VMIN] = 1  # a read is satisfied by one byte
    cc[termios.VTIME] = 0  # no timer
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]
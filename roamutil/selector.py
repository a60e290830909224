"""Wait for readable descriptors and registered signals in one call."""

from __future__ import annotations

import os
import select as _select_mod
import signal as _signal
import sys

from roamutil.assertions import fatal_assert
from roamutil.timestamp import freeze_timestamp

__all__ = ["Select"]


class Select:
    """Process-wide wrapper around select(2) that also reports signals.

    Signals registered with add_signal() are blocked everywhere except
    inside select(), so they are only noticed while waiting there.
    Blocking those signals elsewhere with sigprocmask defeats this.
    Use get_instance(); there is one selector per process.
    """

    MAX_SIGNAL_NUMBER = 64
    # Number of zero-timeout selects after which something looks wrong.
    MAX_POLLS = 10

    verbose = 0

    _instance: Select | None = None
    _wakeup_read: int | None = None
    _wakeup_write: int | None = None

    def __init__(self) -> None:
        self._all_fds: set[int] = set()
        self._read_fds: set[int] = set()
        self._got_signal = [False] * (self.MAX_SIGNAL_NUMBER + 1)
        self._consecutive_polls = 0

    @classmethod
    def get_instance(cls) -> Select:
        """Return the selector shared by the whole process."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def add_fd(self, fd: int) -> None:
        """Watch *fd* for readability."""
        self._all_fds.add(fd)

    def clear_fds(self) -> None:
        """Stop watching every descriptor."""
        self._all_fds.clear()

    @classmethod
    def add_signal(cls, signum: int) -> None:
        """Block *signum* and arrange for select() to report it."""
        fatal_assert(signum >= 0, "signum >= 0")
        fatal_assert(signum <= cls.MAX_SIGNAL_NUMBER, "signum <= MAX_SIGNAL_NUMBER")

        # Block the signal so it is not delivered outside select().
        _signal.pthread_sigmask(_signal.SIG_BLOCK, {signum})

        if cls._wakeup_read is None:
            read_end, write_end = os.pipe()
            os.set_blocking(read_end, False)
            os.set_blocking(write_end, False)
            _signal.set_wakeup_fd(write_end, warn_on_full_buffer=False)
            cls._wakeup_read, cls._wakeup_write = read_end, write_end

        _signal.signal(signum, cls._handle_signal)

    @classmethod
    def _handle_signal(cls, signum: int, frame: object) -> None:
        fatal_assert(signum >= 0, "signum >= 0")
        fatal_assert(signum <= cls.MAX_SIGNAL_NUMBER, "signum <= MAX_SIGNAL_NUMBER")
        cls.get_instance()._got_signal[signum] = True

    def _clear_got_signal(self) -> None:
        self._got_signal = [False] * (self.MAX_SIGNAL_NUMBER + 1)

    def _drain_wakeup(self) -> bool:
        """Record signals queued on the wakeup pipe; tell whether any were."""
        wake = type(self)._wakeup_read
        if wake is None:
            return False
        seen = False
        while True:
            try:
                data = os.read(wake, 512)
            except (BlockingIOError, InterruptedError):
                break
            if not data:
                break
            for signum in data:
                if signum <= self.MAX_SIGNAL_NUMBER:
                    self._got_signal[signum] = True
                seen = True
        return seen

    def _note_polls(self, timeout: int) -> int:
        """Count and rate-limit zero-timeout polls; return the timeout to use."""
        if self.verbose > 1 and timeout == 0:
            sys.stderr.write("select: got poll (timeout 0)\n")
        if timeout == 0:
            self._consecutive_polls += 1
            if self._consecutive_polls >= self.MAX_POLLS:
                if self.verbose > 1 and self._consecutive_polls == self.MAX_POLLS:
                    sys.stderr.write(
                        f"select: got {self.MAX_POLLS} polls, rate limiting.\n"
                    )
                timeout = 1
        elif self._consecutive_polls:
            if self.verbose > 1 and self._consecutive_polls >= self.MAX_POLLS:
                sys.stderr.write(
                    f"select: got {self._consecutive_polls} consecutive polls\n"
                )
            self._consecutive_polls = 0
        return timeout

    def select(self, timeout: int) -> int:
        """Wait up to *timeout* milliseconds (negative: forever).

        Returns the number of readable descriptors. A timeout or an
        arriving signal yields 0 with no descriptor marked readable.
        """
        self._read_fds = set()
        self._clear_got_signal()

        timeout = self._note_polls(timeout)
        seconds = None if timeout < 0 else timeout / 1000

        wake = type(self)._wakeup_read
        watched = set(self._all_fds)
        if wake is not None:
            watched.add(wake)

        interrupted = False
        old_mask = _signal.pthread_sigmask(_signal.SIG_SETMASK, set())
        try:
            ready, _, _ = _select_mod.select(sorted(watched), [], [], seconds)
        except InterruptedError:
            ready = []
            interrupted = True
        finally:
            _signal.pthread_sigmask(_signal.SIG_SETMASK, old_mask)

        if self._drain_wakeup():
            interrupted = True

        if interrupted:
            result = 0
        else:
            self._read_fds = {fd for fd in ready if fd != wake}
            result = len(self._read_fds)

        freeze_timestamp()
        return result

    def read(self, fd: int) -> bool:
        """Tell whether *fd* was readable after the last select()."""
        if fd not in self._all_fds:
            raise ValueError(f"descriptor {fd} is not being watched")
        return fd in self._read_fds

    def signal(self, signum: int) -> bool:
        """Tell whether *signum* arrived, consuming the notification."""
        fatal_assert(signum >= 0, "signum >= 0")
        fatal_assert(signum <= self.MAX_SIGNAL_NUMBER, "signum <= MAX_SIGNAL_NUMBER")
        arrived = self._got_signal[signum]
        self._got_signal[signum] = False
        return arrived

    def any_signal(self) -> bool:
        """Tell whether any signal arrived, without consuming notifications."""
        return any(self._got_signal[: self.MAX_SIGNAL_NUMBER])

    @classmethod
    def set_verbose(cls, verbose: int) -> None:
        """Set the diagnostic level; above 1 polls are reported on stderr."""
        cls.verbose = verbose
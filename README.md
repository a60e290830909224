# roamutil

This package provides small building blocks for programs that sit between a user's terminal and a
remote shell. It runs on POSIX systems and uses only the standard library.

## Installation

```
pip install roamutil
```

## Modules

- `roamutil.assertions`
  - `fatal_assert(condition, expression)` checks an internal invariant. If the condition is false, it writes
    "Fatal assertion failure in function ... Failed test: ..." to stderr and
    then aborts the process with `os.abort()`.
  - `dos_assert(condition, expression)` checks input that arrived from the other side of a connection. If the
    condition is false, it raises `DenialOfServiceError`. The exception carries `expression`,
    `function`, `filename` and `lineno`, and its `fatal` attribute is `False`.
- `roamutil.timestamp`
  - `freeze_timestamp()` reads the monotonic clock and remembers the time in milliseconds. It falls back to wall-clock time if the monotonic clock cannot be read.
  - `frozen_timestamp()` returns the remembered value. On first use it reads the clock.
- `roamutil.swrite`
  - `swrite(fd, data)` writes all of `data` to a file descriptor and retries short writes. Text is encoded as UTF-8. It returns the number of bytes written. It raises `OSError` if a write fails or makes no progress.
- `roamutil.locale_utils`
  - `LocaleVar(name, value)` is a frozen dataclass. Its `str()` is `NAME=value`, or `[no charset variables]` when the name is empty.
  - `get_ctype()` returns the variable that decides the character set. It looks at `LC_ALL`, then `LC_CTYPE`, then `LANG`.
  - `locale_charset()` returns the current character set. It reports `ANSI_X3.4-1968` as `US-ASCII`.
  - `is_utf8_locale()` tells whether that character set is UTF-8.
  - `set_native_locale()` adopts the locale named by the environment. On failure it writes a hint to stderr and returns `False`.
  - `clear_locale_variables()` removes `LANG`, `LANGUAGE`, `LC_ALL` and every `LC_*` category variable from `os.environ`.
- `roamutil.selector`
  - `Select` is a process-wide wrapper around `select(2)`. Obtain it with `Select.get_instance()`. Use `add_fd(fd)` and `clear_fds()` to choose which descriptors are watched.
  - `Select.add_signal(signum)` blocks a signal outside `select()` and records it when it arrives.
  - `select(timeout)` waits up to `timeout` milliseconds. A negative timeout waits forever. It returns the number of readable descriptors. A timeout or a signal yields 0.
  - After a call, `read(fd)` tells whether a descriptor was readable. It raises `ValueError` for a descriptor that is not watched.
  - `signal(signum)` reports a signal and consumes the notification. `any_signal()` reports without consuming.
  - After 10 consecutive zero-timeout polls, each further poll waits 1 ms. `Select.set_verbose(level)` with a level above 1 reports polls on stderr.
  - Every call to `select()` also calls `freeze_timestamp()`.
- `roamutil.pty_compat`
  - `forkpty(termp=None, winp=None)` forks a child whose standard streams are a new pseudo-terminal. `termp` is an optional `termios.tcgetattr`-style list. `winp` is an optional `WindowSize(rows, cols, xpixel=0, ypixel=0)` and defaults to 80x25. It returns `(pid, master_fd)` in the parent and `(0, -1)` in the child.
  - `cfmakeraw(attrs)` returns a raw-mode copy of a termios attribute list. In raw mode a read is satisfied by one byte, with no timer.

## Example

```python
import os
import signal

from roamutil.selector import Select
from roamutil.timestamp import frozen_timestamp

sel = Select.get_instance()
Select.add_signal(signal.SIGTERM)

r, w = os.pipe()
sel.add_fd(r)
os.write(w, b"x")

sel.select(1000)
if sel.read(r):
    print("readable at", frozen_timestamp(), "ms")
if sel.signal(signal.SIGTERM):
    print("asked to stop")
```

Running a program on a pseudo-terminal and copying its output:

```python
import os

from roamutil.pty_compat import WindowSize, forkpty
from roamutil.swrite import swrite

pid, master = forkpty(winp=WindowSize(rows=24, cols=80))
if pid == 0:
    os.execvp("echo", ["echo", "hello"])

while True:
    try:
        chunk = os.read(master, 1024)
    except OSError:
        break
    if not chunk:
        break
    swrite(1, chunk)
os.waitpid(pid, 0)
```

## What it does not do

This is a library only. It installs no command-line program. It contains no
network transport, encryption or terminal emulation. Those are for the
program that uses these pieces.

## Running the tests

```
pip install "roamutil[test]"
pytest
```
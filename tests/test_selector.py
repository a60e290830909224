import os
import signal
import time

import pytest

from roamutil.selector import Select
from roamutil.timestamp import frozen_timestamp


@pytest.fixture
def sel():
    instance = Select.get_instance()
    instance.clear_fds()
    Select.set_verbose(0)
    instance.select(1)  # resets the poll counter
    yield instance
    instance.clear_fds()
    Select.set_verbose(0)


@pytest.fixture
def pipe():
    read_end, write_end = os.pipe()
    yield read_end, write_end
    os.close(read_end)
    os.close(write_end)


def test_get_instance_is_shared(sel, pipe):
    read_end, write_end = pipe
    first = Select.get_instance()
    first.add_fd(read_end)
    os.write(write_end, b"x")
    second = Select.get_instance()
    assert second.select(0) == 1
    assert second.read(read_end) is True
    assert first.read(read_end) is True


def test_ready_descriptor_is_reported(sel, pipe):
    read_end, write_end = pipe
    sel.add_fd(read_end)
    os.write(write_end, b"x")
    assert sel.select(0) == 1
    assert sel.read(read_end) is True


def test_idle_descriptor_times_out(sel, pipe):
    read_end, _ = pipe
    sel.add_fd(read_end)
    start = time.monotonic()
    assert sel.select(50) == 0
    assert time.monotonic() - start >= 0.04
    assert sel.read(read_end) is False


def test_negative_timeout_returns_when_ready(sel, pipe):
    read_end, write_end = pipe
    sel.add_fd(read_end)
    os.write(write_end, b"y")
    assert sel.select(-1) == 1
    assert sel.read(read_end)


def test_read_of_unwatched_descriptor_raises(sel, pipe):
    read_end, _ = pipe
    with pytest.raises(ValueError):
        sel.read(read_end)


def test_clear_fds_forgets_descriptors(sel, pipe):
    read_end, write_end = pipe
    sel.add_fd(read_end)
    os.write(write_end, b"z")
    sel.clear_fds()
    assert sel.select(0) == 0
    with pytest.raises(ValueError):
        sel.read(read_end)


def test_select_freezes_timestamp(sel):
    before = frozen_timestamp()
    time.sleep(0.05)
    sel.select(0)
    assert frozen_timestamp() - before >= 40


def test_signal_interrupts_select(sel, pipe):
    read_end, write_end = pipe
    Select.add_signal(signal.SIGUSR1)
    try:
        sel.add_fd(read_end)
        os.write(write_end, b"x")
        os.kill(os.getpid(), signal.SIGUSR1)
        start = time.monotonic()
        assert sel.select(2000) == 0
        assert time.monotonic() - start < 1.5
        assert sel.read(read_end) is False
        assert sel.any_signal() is True
        assert sel.signal(signal.SIGUSR1) is True
        assert sel.signal(signal.SIGUSR1) is False
        assert sel.any_signal() is False
    finally:
        signal.signal(signal.SIGUSR1, signal.SIG_IGN)
        signal.pthread_sigmask(signal.SIG_UNBLOCK, {signal.SIGUSR1})


def test_signal_notifications_cleared_by_next_select(sel):
    Select.add_signal(signal.SIGUSR2)
    try:
        os.kill(os.getpid(), signal.SIGUSR2)
        sel.select(1000)
        assert sel.any_signal()
        sel.select(0)
        assert sel.signal(signal.SIGUSR2) is False
    finally:
        signal.signal(signal.SIGUSR2, signal.SIG_IGN)
        signal.pthread_sigmask(signal.SIG_UNBLOCK, {signal.SIGUSR2})


def test_poll_rate_limit_is_reported(sel, capsys):
    capsys.readouterr()
    Select.set_verbose(2)
    for _ in range(Select.MAX_POLLS):
        sel.select(0)
    err = capsys.readouterr().err
    assert err.count("select: got poll (timeout 0)") == Select.MAX_POLLS
    assert err.count(f"select: got {Select.MAX_POLLS} polls, rate limiting.") == 1
    sel.select(5)
    err = capsys.readouterr().err
    assert f"select: got {Select.MAX_POLLS} consecutive polls" in err


def test_quiet_by_default(sel, capsys):
    capsys.readouterr()
    for _ in range(Select.MAX_POLLS + 2):
        sel.select(0)
    assert capsys.readouterr().err == ""
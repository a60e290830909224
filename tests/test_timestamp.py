import time
from unittest import mock

from roamutil import timestamp
from roamutil.timestamp import freeze_timestamp, frozen_timestamp


def test_first_read_initialises_cache(monkeypatch):
    monkeypatch.setattr(timestamp, "_millis_cache", None)
    first = frozen_timestamp()
    assert first >= 0
    assert timestamp._millis_cache == first


def test_value_stays_frozen_until_next_freeze():
    freeze_timestamp()
    first = frozen_timestamp()
    time.sleep(0.02)
    assert frozen_timestamp() == first


def test_freeze_moves_forward():
    freeze_timestamp()
    before = frozen_timestamp()
    time.sleep(0.02)
    freeze_timestamp()
    after = frozen_timestamp()
    assert after > before


def test_repeated_freezes_never_go_backwards():
    values = []
    for _ in range(50):
        freeze_timestamp()
        values.append(frozen_timestamp())
    assert values == sorted(values)


def test_falls_back_to_wall_clock():
    with mock.patch("time.monotonic_ns", side_effect=OSError), mock.patch(
        "time.time_ns", return_value=1_234_567_890_123_456_789
    ):
        freeze_timestamp()
    assert frozen_timestamp() == 1_234_567_890_123
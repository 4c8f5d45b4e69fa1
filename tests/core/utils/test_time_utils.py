import time
from datetime import datetime

from image_pipeline.core.utils.time import unix_millis, utc_now_iso


def test_utc_now_iso_is_timezone_aware() -> None:
    parsed = datetime.fromisoformat(utc_now_iso())

    assert parsed.utcoffset() is not None
    assert parsed.utcoffset().total_seconds() == 0


def test_unix_millis_tracks_wall_clock() -> None:
    before = int(time.time() * 1000)
    value = unix_millis()
    after = int(time.time() * 1000)

    assert before - 1 <= value <= after + 1

# tests/test_converters.py

from datetime import datetime, timedelta, timezone

import pytest

from core.errors import CorruptedDataError
from data.converters import (
    SYNC_STATUS_ORDINALS,
    from_epoch_millis,
    normalize_datetime,
    sync_status_from_ordinal,
    sync_status_to_ordinal,
    to_epoch_millis,
)
from data.script import SyncStatus


class TestSyncStatusOrdinals:

    def test_every_status_has_a_distinct_ordinal(self):
        assert set(SYNC_STATUS_ORDINALS) == set(SyncStatus)
        assert len(set(SYNC_STATUS_ORDINALS.values())) == len(SyncStatus)

    def test_ordinals_round_trip(self):
        for status in SyncStatus:
            assert sync_status_from_ordinal(sync_status_to_ordinal(status)) is status

    def test_persisted_ordinals_are_fixed(self):
        assert sync_status_to_ordinal(SyncStatus.NOT_SYNCED) == 0
        assert sync_status_to_ordinal(SyncStatus.SYNCED) == 1
        assert sync_status_to_ordinal(SyncStatus.PENDING) == 2
        assert sync_status_to_ordinal(SyncStatus.CONFLICT) == 3

    def test_unknown_ordinal_is_corrupted_data(self):
        with pytest.raises(CorruptedDataError):
            sync_status_from_ordinal(42)


class TestTimestamps:

    def test_millis_round_trip(self):
        when = datetime(2024, 5, 1, 12, 30, 15, 123000, tzinfo=timezone.utc)
        assert from_epoch_millis(to_epoch_millis(when)) == when

    def test_epoch_is_zero(self):
        assert to_epoch_millis(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0

    def test_naive_datetime_is_taken_as_utc(self):
        naive = datetime(2024, 5, 1, 12, 0)
        assert normalize_datetime(naive) == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_other_timezones_are_converted(self):
        plus_two = timezone(timedelta(hours=2))
        value = normalize_datetime(datetime(2024, 5, 1, 14, 0, tzinfo=plus_two))
        assert value.tzinfo == timezone.utc
        assert value.hour == 12

    def test_microseconds_are_truncated_to_millis(self):
        value = normalize_datetime(datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc))
        assert value.microsecond == 123000

"""Unit tests for the event store query layer."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone
from sqlalchemy.exc import IntegrityError
from app.models.bin_event import BinEvent
from app.models.raw_event import RawEvent
from app.services import event_store
from app.services.errors import EmptyResultError, StoreError, ValidationError
from app.services.export_service import export_bin_events_csv, export_raw_events_csv


class TestInsertRawEvent:
    def test_missing_raw_value_defaults_to_empty_object(self, db_session):
        event = event_store.insert_raw_event(db_session, 3, "LID", "OPEN_START")
        assert event.id > 0
        assert event.raw_value == "{}"
        assert event.timestamp is not None
        assert event.created_at is not None

    def test_empty_string_raw_value_defaults(self, db_session):
        event = event_store.insert_raw_event(db_session, 3, "LID", "OPEN_START", "")
        assert event.raw_value == "{}"

    def test_object_raw_value_stored_as_json_text(self, db_session):
        event = event_store.insert_raw_event(db_session, 3, "LORA", "PKT", {"rssi": -91, "seq": [1, 2]})
        assert event.raw_value == '{"rssi":-91,"seq":[1,2]}'

    def test_all_fields_optional(self, db_session):
        event = event_store.insert_raw_event(db_session, None, None, None)
        assert event.opening_number is None

    def test_commit_failure_rolls_back(self):
        db = MagicMock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("boom"))

        with pytest.raises(StoreError) as exc:
            event_store.insert_raw_event(db, 1, "LID", "OPEN")

        db.rollback.assert_called_once()
        assert "boom" in exc.value.detail


class TestInsertBinEvent:
    def test_missing_opening_number_never_touches_db(self):
        db = MagicMock()

        with pytest.raises(ValidationError, match="opening_number is required"):
            event_store.insert_bin_event(db, max_angle_deg=90)

        db.add.assert_not_called()
        db.commit.assert_not_called()

    def test_zero_is_a_valid_opening_number(self, db_session):
        assert event_store.insert_bin_event(db_session, opening_number=0).opening_number == 0

    def test_timestamp_defaults_to_now(self, db_session):
        before = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=1)
        event = event_store.insert_bin_event(db_session, opening_number=42)
        assert event.timestamp.replace(tzinfo=None) >= before

    def test_datetimes_normalised_to_utc(self, db_session):
        plus_two = timezone(timedelta(hours=2))
        event = event_store.insert_bin_event(
            db_session,
            opening_number=5,
            timestamp=datetime(2026, 5, 1, 10, 0, tzinfo=plus_two),
            open_start_time=datetime(2026, 5, 1, 10, 0, 1, tzinfo=plus_two),
        )
        assert event.timestamp.replace(tzinfo=None) == datetime(2026, 5, 1, 8, 0)
        assert event.open_start_time.replace(tzinfo=None) == datetime(2026, 5, 1, 8, 0, 1)

    def test_duplicate_opening_numbers_allowed(self, db_session):
        a = event_store.insert_bin_event(db_session, opening_number=9)
        b = event_store.insert_bin_event(db_session, opening_number=9)
        assert a.id != b.id
        assert db_session.query(BinEvent).filter(BinEvent.opening_number == 9).count() == 2


class TestListing:
    def _raw(self, db, opening, ts):
        db.add(RawEvent(opening_number=opening, event_type="LID", event_detail="X",
                        raw_value="{}", timestamp=ts))
        db.commit()

    def test_raw_newest_first_and_limited(self, db_session):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i in range(5):
            self._raw(db_session, 1, base + timedelta(minutes=i))

        rows = event_store.list_raw_events(db_session, limit=2)
        assert [r.timestamp.replace(tzinfo=None) for r in rows] == [
            datetime(2026, 1, 1, 0, 4), datetime(2026, 1, 1, 0, 3),
        ]

    def test_raw_filter_by_opening(self, db_session):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self._raw(db_session, 1, base)
        self._raw(db_session, 2, base)
        rows = event_store.list_raw_events(db_session, opening_number=2)
        assert [r.opening_number for r in rows] == [2]

    def test_raw_export_is_oldest_first_and_unbounded(self, db_session):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i in (3, 1, 2):
            self._raw(db_session, 1, base + timedelta(minutes=i))
        rows = event_store.list_raw_events_for_export(db_session)
        assert [r.timestamp.minute for r in rows] == [1, 2, 3]

    def test_bin_ordering(self, db_session):
        for n in (3, 10, 7):
            event_store.insert_bin_event(db_session, opening_number=n)
        assert [r.opening_number for r in event_store.list_bin_events(db_session, limit=2)] == [10, 7]
        assert [r.opening_number for r in event_store.list_bin_events_for_export(db_session)] == [3, 7, 10]

    def test_query_failure_is_store_error(self):
        db = MagicMock()
        db.query.return_value.order_by.return_value.limit.return_value.all.side_effect = \
            IntegrityError("SELECT", {}, Exception("gone"))

        with pytest.raises(StoreError):
            event_store.list_bin_events(db)
        db.rollback.assert_called_once()


class TestCheckConnection:
    def test_ok(self, db_session):
        event_store.check_connection(db_session)

    def test_failure(self):
        db = MagicMock()
        db.execute.side_effect = IntegrityError("SELECT 1", {}, Exception("down"))
        with pytest.raises(StoreError):
            event_store.check_connection(db)


class TestExport:
    def test_empty_export_raises(self, db_session):
        with pytest.raises(EmptyResultError):
            export_raw_events_csv(db_session, opening_number=7)

    def test_bin_export_is_csv_text(self, db_session):
        event_store.insert_bin_event(db_session, opening_number=4, packet_details="a,b")
        lines = export_bin_events_csv(db_session).split("\n")
        assert lines[0].startswith("id,created_at,opening_number,timestamp,")
        assert len(lines) == 2
        assert '"a,b"' in lines[1]

"""Test check-in/check-out and record maintenance"""
import logging
from datetime import date, datetime, timedelta, timezone

import pytest
from atams.exceptions import BadRequestException, ConflictException, NotFoundException

from timecheck.schemas import WorkSessionUpdate
from timecheck.services import WorkSessionService

UTC = timezone.utc


def test_check_in_creates_open_session(db, service):
    """A check-in starts a session without check-out"""
    session = service.check_in(db, now=datetime(2024, 1, 5, 9, 0))

    assert session.ws_check_in == datetime(2024, 1, 5, 9, 0, tzinfo=UTC)
    assert session.ws_check_out is None
    assert session.is_open
    assert session.duration_seconds is None
    assert session.formatted_duration is None


def test_check_in_converts_offset_to_utc(db, service):
    seoul = timezone(timedelta(hours=9))
    session = service.check_in(db, now=datetime(2024, 1, 5, 18, 0, tzinfo=seoul))

    assert session.ws_check_in == datetime(2024, 1, 5, 9, 0, tzinfo=UTC)


def test_check_out_closes_session(db, service):
    """Working 09:00 to 17:30 gives 8.5 hours"""
    opened = service.check_in(db, now=datetime(2024, 1, 5, 9, 0))
    closed = service.check_out(db, now=datetime(2024, 1, 5, 17, 30))

    assert closed.ws_id == opened.ws_id
    assert closed.ws_check_out == datetime(2024, 1, 5, 17, 30, tzinfo=UTC)
    assert not closed.is_open
    assert closed.duration_seconds == 8.5 * 3600
    assert closed.formatted_duration == "08:30"
    assert service.total_hours_for_month(db, date(2024, 1, 20)) == pytest.approx(8.5)


def test_check_in_while_open_is_rejected(db, service):
    service.check_in(db, now=datetime(2024, 1, 5, 9, 0))

    with pytest.raises(ConflictException):
        service.check_in(db, now=datetime(2024, 1, 5, 10, 0))

    assert len(service.get_all(db)) == 1


def test_check_in_while_open_allowed_with_warning(db, caplog):
    service = WorkSessionService(allow_concurrent_open_sessions=True)
    first = service.check_in(db, now=datetime(2024, 1, 5, 9, 0))

    with caplog.at_level(logging.WARNING):
        second = service.check_in(db, now=datetime(2024, 1, 5, 10, 0))

    assert second.ws_id != first.ws_id
    assert f"session {first.ws_id} is still open" in caplog.text


def test_check_in_override_per_call(db, service):
    service.check_in(db, now=datetime(2024, 1, 5, 9, 0))
    service.check_in(db, now=datetime(2024, 1, 5, 10, 0), allow_concurrent=True)

    assert len(service.get_all(db)) == 2


def test_check_out_closes_latest_open_session(db, add_session):
    service = WorkSessionService(allow_concurrent_open_sessions=True)
    earlier = add_session(datetime(2024, 1, 5, 9, 0))
    later = add_session(datetime(2024, 1, 5, 10, 0))

    closed = service.check_out(db, now=datetime(2024, 1, 5, 12, 0))

    assert closed.ws_id == later.ws_id
    assert service.get_by_id(db, earlier.ws_id).is_open


def test_check_out_without_open_session(db, service, add_session):
    """Nothing open: the store is left exactly as it was"""
    add_session(datetime(2024, 1, 5, 9, 0), datetime(2024, 1, 5, 17, 0))
    before = service.get_all(db)

    with pytest.raises(NotFoundException):
        service.check_out(db, now=datetime(2024, 1, 5, 18, 0))

    assert service.get_all(db) == before


def test_check_out_on_empty_store(db, service):
    with pytest.raises(NotFoundException):
        service.check_out(db)

    assert service.get_all(db) == []


def test_get_all_newest_first(db, service, add_session):
    add_session(datetime(2024, 1, 3, 9, 0), datetime(2024, 1, 3, 17, 0))
    add_session(datetime(2024, 1, 5, 9, 0), datetime(2024, 1, 5, 17, 0))
    add_session(datetime(2024, 1, 4, 9, 0), datetime(2024, 1, 4, 17, 0))

    days = [s.ws_check_in.day for s in service.get_all(db)]

    assert days == [5, 4, 3]


def test_get_for_date_is_half_open(db, service, add_session):
    add_session(datetime(2024, 1, 5, 0, 0), datetime(2024, 1, 5, 1, 0))
    add_session(datetime(2024, 1, 5, 23, 59, 59), datetime(2024, 1, 6, 2, 0))
    add_session(datetime(2024, 1, 6, 0, 0), datetime(2024, 1, 6, 1, 0))

    sessions = service.get_for_date(db, date(2024, 1, 5))

    assert [s.ws_check_in.hour for s in sessions] == [23, 0]


def test_get_for_month_is_half_open(db, service, add_session):
    add_session(datetime(2023, 12, 31, 23, 0), datetime(2024, 1, 1, 1, 0))
    add_session(datetime(2024, 1, 31, 23, 0), datetime(2024, 2, 1, 1, 0))
    add_session(datetime(2024, 2, 1, 0, 0), datetime(2024, 2, 1, 8, 0))

    january = service.get_for_month(db, date(2024, 1, 15))

    assert len(january) == 1
    assert january[0].ws_check_in == datetime(2024, 1, 31, 23, 0, tzinfo=UTC)


def test_get_between_rejects_empty_window(db, service):
    with pytest.raises(BadRequestException):
        service.get_between(db, datetime(2024, 1, 5), datetime(2024, 1, 5))


def test_get_by_id_not_found(db, service):
    with pytest.raises(NotFoundException):
        service.get_by_id(db, 999)


def test_update_check_out(db, service, add_session):
    row = add_session(datetime(2024, 1, 5, 9, 0))

    updated = service.update(
        db, row.ws_id, WorkSessionUpdate(ws_check_out=datetime(2024, 1, 5, 12, 0))
    )

    assert updated.ws_check_in == datetime(2024, 1, 5, 9, 0, tzinfo=UTC)
    assert updated.duration_seconds == 3 * 3600


def test_update_rejects_check_out_before_check_in(db, service, add_session):
    row = add_session(datetime(2024, 1, 5, 9, 0), datetime(2024, 1, 5, 17, 0))

    with pytest.raises(BadRequestException):
        service.update(db, row.ws_id, WorkSessionUpdate(ws_check_in=datetime(2024, 1, 5, 18, 0)))

    assert service.get_by_id(db, row.ws_id).ws_check_in == datetime(2024, 1, 5, 9, 0, tzinfo=UTC)


def test_update_requires_a_field(db, service, add_session):
    row = add_session(datetime(2024, 1, 5, 9, 0))

    with pytest.raises(BadRequestException):
        service.update(db, row.ws_id, WorkSessionUpdate())


def test_update_missing_session(db, service):
    with pytest.raises(NotFoundException):
        service.update(db, 42, WorkSessionUpdate(ws_check_out=datetime(2024, 1, 5, 12, 0)))


def test_delete_removes_from_queries(db, service, add_session):
    ws_id = add_session(datetime(2024, 1, 5, 9, 0), datetime(2024, 1, 5, 17, 0)).ws_id

    service.delete(db, ws_id)

    assert service.get_all(db) == []
    assert service.get_for_date(db, date(2024, 1, 5)) == []
    assert service.total_hours_for_month(db, date(2024, 1, 5)) == 0
    with pytest.raises(NotFoundException):
        service.delete(db, ws_id)


def test_delete_all_and_ids_keep_increasing(db, service, add_session):
    first_id = add_session(datetime(2024, 1, 5, 9, 0), datetime(2024, 1, 5, 17, 0)).ws_id
    second_id = add_session(datetime(2024, 1, 6, 9, 0), datetime(2024, 1, 6, 17, 0)).ws_id

    assert service.delete_all(db) == 2
    assert service.get_all(db) == []

    third = service.check_in(db, now=datetime(2024, 1, 7, 9, 0))
    assert first_id < second_id < third.ws_id


def test_status_follows_latest_session(db, service):
    empty = service.status(db)
    assert not empty.checked_in
    assert empty.open_sessions == 0
    assert empty.latest is None

    service.check_in(db, now=datetime(2024, 1, 5, 9, 0))
    assert service.status(db).checked_in
    assert service.status(db).open_sessions == 1

    service.check_out(db, now=datetime(2024, 1, 5, 17, 0))
    status = service.status(db)
    assert not status.checked_in
    assert status.latest.ws_check_out == datetime(2024, 1, 5, 17, 0, tzinfo=UTC)


def test_open_sessions_do_not_count_towards_totals(db, service, add_session):
    add_session(datetime(2024, 1, 5, 9, 0), datetime(2024, 1, 5, 13, 0))
    add_session(datetime(2024, 1, 6, 9, 0))

    assert service.total_hours_for_month(db, date(2024, 1, 1)) == pytest.approx(4.0)


def test_written_times_drop_fractional_seconds(db, service):
    opened = service.check_in(db, now=datetime(2024, 1, 5, 9, 0, 0, 999999))
    service.update(
        db, opened.ws_id, WorkSessionUpdate(ws_check_in=datetime(2024, 1, 5, 8, 59, 59, 500000, tzinfo=UTC))
    )
    closed = service.check_out(db, now=datetime(2024, 1, 5, 17, 0, 0, 250000))

    assert closed.ws_check_in == datetime(2024, 1, 5, 8, 59, 59, tzinfo=UTC)
    assert closed.ws_check_out == datetime(2024, 1, 5, 17, 0, tzinfo=UTC)

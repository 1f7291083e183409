"""Tests for sequential booking code allocation."""

import pytest
from sqlalchemy import select

from padmasambhava_trips.models import Booking, SequenceCounter
from padmasambhava_trips.services.booking_code import (
    BOOKING_CODE_PATTERN,
    allocate_booking_code,
    format_booking_code,
    parse_booking_code,
    reserve_booking_code,
)


def _legacy_booking(code: str) -> Booking:
    return Booking(
        booking_code=code,
        trip_id="trip-1",
        trip_name="Bhutan Highlights",
        customer_name="Karma Wangchuk",
        email="karma@example.com",
        phone="12345",
        travelers=1,
        total_amount=900.0,
    )


class TestFormat:

    def test_zero_pads_to_six_digits(self):
        assert format_booking_code(1) == "BK000001"
        assert format_booking_code(42) == "BK000042"
        assert format_booking_code(999999) == "BK999999"

    def test_rejects_non_positive_ordinals(self):
        with pytest.raises(ValueError):
            format_booking_code(0)

    def test_formatted_codes_match_pattern(self):
        for n in (1, 10, 12345):
            assert BOOKING_CODE_PATTERN.match(format_booking_code(n))

    def test_parse_round_trips_ordinal(self):
        assert parse_booking_code("BK000123") == 123
        assert parse_booking_code("XX000123") is None
        assert parse_booking_code("BK12") is None
        assert parse_booking_code("") is None


class TestAllocation:

    async def test_first_code_on_empty_store(self, db_session):
        assert await allocate_booking_code(db_session) == "BK000001"
        assert await allocate_booking_code(db_session) == "BK000002"
        await db_session.commit()

        value = (
            await db_session.execute(
                select(SequenceCounter.value).where(SequenceCounter.name == "bookings")
            )
        ).scalar_one()
        assert value == 2

    async def test_continues_after_existing_bookings(self, db_session):
        db_session.add_all([_legacy_booking(f"BK00000{i}") for i in (1, 2, 3)])
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000004"

    async def test_never_reuses_highest_existing_code(self, db_session):
        # Two rows left after deletions, but BK000007 is still taken
        db_session.add_all([_legacy_booking("BK000001"), _legacy_booking("BK000007")])
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000008"

    async def test_rolled_back_allocation_is_not_consumed(self, db_session):
        assert await allocate_booking_code(db_session) == "BK000001"
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000002"
        await db_session.rollback()

        assert await allocate_booking_code(db_session) == "BK000002"

    async def test_seeds_past_highest_code_ignoring_look_alikes(self, db_session):
        db_session.add_all(
            [
                _legacy_booking("BK000004"),
                _legacy_booking("BKZZ0001"),
                _legacy_booking("ZZ999999"),
            ]
        )
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000005"

    async def test_skips_codes_stored_behind_the_counter(self, db_session):
        assert await allocate_booking_code(db_session) == "BK000001"
        db_session.add(_legacy_booking("BK000002"))
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000003"
        await db_session.commit()

        value = (
            await db_session.execute(
                select(SequenceCounter.value).where(SequenceCounter.name == "bookings")
            )
        ).scalar_one()
        assert value == 3


class TestReservation:

    async def test_supplied_code_raises_the_counter(self, db_session):
        assert await allocate_booking_code(db_session) == "BK000001"

        await reserve_booking_code(db_session, "BK000040")
        db_session.add(_legacy_booking("BK000040"))
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000041"

    async def test_supplied_code_below_the_counter_leaves_it_alone(self, db_session):
        for _ in range(5):
            await allocate_booking_code(db_session)

        await reserve_booking_code(db_session, "BK000002")

        assert await allocate_booking_code(db_session) == "BK000006"

    async def test_supplied_code_seeds_a_missing_counter(self, db_session):
        await reserve_booking_code(db_session, "BK000010")
        db_session.add(_legacy_booking("BK000010"))
        await db_session.commit()

        assert await allocate_booking_code(db_session) == "BK000011"

    async def test_foreign_codes_do_not_move_the_sequence(self, db_session):
        await reserve_booking_code(db_session, "LEGACY-77")

        assert await allocate_booking_code(db_session) == "BK000001"

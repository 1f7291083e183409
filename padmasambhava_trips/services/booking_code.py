"""
Sequential booking code allocation.

Codes look like ``BK000042``: a fixed prefix followed by the 1-based booking
ordinal, zero padded to six digits. The ordinal comes from a row in the
``sequence_counters`` table that is incremented with a single
``UPDATE ... RETURNING`` statement, so two concurrent creates can never be
handed the same number.
"""

import logging
import re
from typing import Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.booking import Booking
from ..models.sequence import SequenceCounter
from ..utils.exceptions import DuplicateKeyError

logger = logging.getLogger(__name__)

BOOKING_CODE_PREFIX = "BK"
BOOKING_CODE_DIGITS = 6
BOOKING_CODE_PATTERN = re.compile(r"^BK(\d{6})$")

BOOKING_SEQUENCE = "bookings"


def format_booking_code(ordinal: int) -> str:
    """
    Render a booking ordinal as a booking code.

    Args:
        ordinal: 1-based booking number

    Returns:
        The prefixed, zero-padded code
    """
    if ordinal < 1:
        raise ValueError("Booking ordinal must be positive")
    return f"{BOOKING_CODE_PREFIX}{ordinal:0{BOOKING_CODE_DIGITS}d}"


def parse_booking_code(code: str) -> Optional[int]:
    """Return the ordinal encoded in a booking code, or None if it is not one."""
    match = BOOKING_CODE_PATTERN.match(code or "")
    if not match:
        return None
    return int(match.group(1))


async def _increment(session: AsyncSession) -> Optional[int]:
    result = await session.execute(
        update(SequenceCounter)
        .where(SequenceCounter.name == BOOKING_SEQUENCE)
        .values(value=SequenceCounter.value + 1)
        .returning(SequenceCounter.value)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one_or_none()


async def _highest_issued_ordinal(session: AsyncSession) -> int:
    """
    Largest ordinal among stored ``BK`` codes, or 0.

    Codes are fixed width, so text order matches numeric order among valid
    codes. Look-alikes such as ``BKAB1234`` sort above them and are skipped.
    """
    result = await session.execute(
        select(Booking.booking_code)
        .where(
            Booking.booking_code.like(f"{BOOKING_CODE_PREFIX}%"),
            func.length(Booking.booking_code) == len(BOOKING_CODE_PREFIX) + BOOKING_CODE_DIGITS,
        )
        .order_by(desc(Booking.booking_code))
    )
    for code in result.scalars():
        ordinal = parse_booking_code(code)
        if ordinal is not None:
            return ordinal
    return 0


async def _seed(session: AsyncSession, value: int) -> None:
    """
    Create the counter row, holding the last ordinal handed out.

    The starting point continues from the bookings already stored, so
    databases populated before the counter existed keep their numbering.
    """
    total = (await session.execute(select(func.count(Booking.id)))).scalar_one()
    value = max(value, total, await _highest_issued_ordinal(session))

    session.add(SequenceCounter(name=BOOKING_SEQUENCE, value=value))
    try:
        await session.flush()
    except IntegrityError:
        # Another request seeded the counter first
        await session.rollback()
        raise DuplicateKeyError("Booking code already exists, please try again", field="bookingCode")

    logger.info("Seeded booking sequence at %s", value)


async def _code_taken(session: AsyncSession, code: str) -> bool:
    result = await session.execute(
        select(Booking.id).where(Booking.booking_code == code).limit(1)
    )
    return result.first() is not None


async def next_booking_ordinal(session: AsyncSession) -> int:
    """Atomically take the next booking ordinal."""
    ordinal = await _increment(session)
    if ordinal is None:
        await _seed(session, 0)
        ordinal = await _increment(session)
    return ordinal


async def allocate_booking_code(session: AsyncSession) -> str:
    """
    Allocate the next free booking code inside the caller's transaction.

    Ordinals already used by stored bookings are skipped, and the counter
    stays past them. The increments are rolled back together with the
    booking insert if the insert fails, so failed creates do not consume
    numbers.
    """
    while True:
        code = format_booking_code(await next_booking_ordinal(session))
        if not await _code_taken(session, code):
            return code
        logger.warning("Booking code %s already in use, advancing the sequence", code)


async def reserve_booking_code(session: AsyncSession, code: str) -> None:
    """
    Keep the counter ahead of a code supplied by the caller.

    Codes outside the ``BK######`` format do not affect the sequence.
    """
    ordinal = parse_booking_code(code)
    if ordinal is None:
        return

    result = await session.execute(
        update(SequenceCounter)
        .where(SequenceCounter.name == BOOKING_SEQUENCE)
        .where(SequenceCounter.value < ordinal)
        .values(value=ordinal)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        return

    exists = (
        await session.execute(
            select(SequenceCounter.name).where(SequenceCounter.name == BOOKING_SEQUENCE)
        )
    ).first()
    if exists is None:
        await _seed(session, ordinal)

"""Day-scoped lookup and upsert shared by mood records and habit completions.

A *day bucket* is the closed window ``[00:00:00.000, 23:59:59.999]`` of the
calendar day that an instant's own fields express. Aware instants keep their
offset and naive instants stay naive, so the window is never silently moved to
UTC.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def day_window(instant: datetime) -> tuple[datetime, datetime]:
    """Return the first and last instant of ``instant``'s local calendar day."""
    start = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    end = instant.replace(hour=23, minute=59, second=59, microsecond=999000)
    return start, end


def day_bucket_statement(model: Any, owner: Mapping[str, Any], instant: datetime):
    """Select rows of ``model`` owned by ``owner`` whose ``date`` falls on ``instant``'s day."""
    start, end = day_window(instant)
    conditions = [getattr(model, column) == value for column, value in owner.items()]
    return (
        select(model)
        .where(*conditions)
        .where(model.date >= start)
        .where(model.date <= end)
        .order_by(model.date)
    )


async def find_day_record(
    session: AsyncSession,
    model: type[RecordT],
    owner: Mapping[str, Any],
    instant: datetime,
) -> RecordT | None:
    """Return the first record for the owner's day bucket, if any."""
    result = await session.execute(day_bucket_statement(model, owner, instant).limit(1))
    return result.scalars().first()


async def upsert_day_record(
    session: AsyncSession,
    model: type[RecordT],
    owner: Mapping[str, Any],
    instant: datetime,
    *,
    apply: Callable[[RecordT], None],
    create: Callable[[], RecordT],
) -> None:
    """Update the owner's record for ``instant``'s day in place, or insert one.

    ``apply`` overwrites the payload fields of an existing record. ``create``
    builds a new record and must use the original ``instant`` as its date, not
    the start of the day. Lookup and write are two statements with no lock in
    between; concurrent callers for the same bucket race and the last write
    wins.
    """
    existing = await find_day_record(session, model, owner, instant)
    if existing is not None:
        apply(existing)
        logger.debug("Updated %s for %s on %s", model.__name__, dict(owner), instant.date())
    else:
        session.add(create())
        logger.debug("Inserted %s for %s on %s", model.__name__, dict(owner), instant.date())
    await session.flush()

"""Attendance session identity and the "my slots today" resolver.

Both are pure functions: the reference date is always passed in.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Union

from ..core.constants import DATE_FORMAT, SESSION_KEY_SEPARATOR
from ..core.enums import Weekday

logger = logging.getLogger(__name__)


def session_key(class_id: str, division_id: str, subject_id: str, timeslot_id: str, on: Union[date, str]) -> str:
    """Stable identity of one session, used as the lock and duplicate key.

    Order-sensitive. Components are assumed not to contain the separator.
    """
    date_string = on.strftime(DATE_FORMAT) if isinstance(on, date) else str(on)
    return SESSION_KEY_SEPARATOR.join([class_id, division_id, subject_id, timeslot_id, date_string])


def resolve_today_slots(
    teacher_email: Optional[str],
    class_id: Optional[str],
    division_id: Optional[str],
    subject_id: Optional[str],
    subject_type: Optional[str],
    time_slots: Optional[Iterable],
    *,
    today: date,
) -> List:
    """Slots the teacher may mark attendance for on ``today``.

    A slot qualifies only when class, division, subject, subject type, teacher
    and weekday all match. Sunday, or any missing selection, yields an empty
    list. Results are ordered by start time.
    """
    weekday = Weekday.for_date(today)
    if weekday is None or not (teacher_email and class_id and division_id and subject_id and subject_type):
        return []

    matches = [
        slot
        for slot in (time_slots or ())
        if slot.class_id == class_id
        and slot.division_id == division_id
        and slot.subject_id == subject_id
        and slot.subject_type == subject_type
        and slot.teacher_email == teacher_email
        and slot.day == weekday
    ]
    matches.sort(key=lambda s: s.start_time or "")
    logger.debug("resolved %d slot(s) for %s on %s", len(matches), teacher_email, today)
    return matches

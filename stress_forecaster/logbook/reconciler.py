"""
Log reconciliation: raw daily entries → one authoritative record per day.

Purpose
-------
The log source may return several entries for the same calendar date (a
resubmission, a restore racing a normal log, ...).  ``reconcile_logs()``
collapses them into exactly one ``DayRecord`` per date so calendars and the
imputation estimator never see duplicates.

Key design choices
------------------
1.  **Last-write-wins**: for a date already present, a candidate replaces the
    held entry when its ``created_at`` is greater than *or equal to* the held
    one.  Equal timestamps therefore prefer the entry that appears later in
    the input list; callers must pass entries in their original order.
    Missing timestamps compare as the epoch.

2.  **Latest date by value**: the maximum date is tracked as a ``date``, not
    by string comparison, so ``2024-1-9`` and ``2024-01-10`` order correctly.

3.  **Today placeholder**: when nothing was logged today, an empty
    ``DayRecord`` (``is_empty=True``, metrics zero) is added under today's key
    so the UI always has a cell to render.  The placeholder does not count
    toward ``latest_date``.

4.  **Malformed dates**: entries with unparsable dates are skipped and
    counted in ``skipped``; they never abort the reconciliation.

The function is pure: it rebuilds the whole map on every call.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from stress_forecaster.models.log import DayRecord, RawLogEntry
from stress_forecaster.taxonomy.stress_taxonomy import score_for_level, status_from_score
from stress_forecaster.utils.time_utils import format_date_key, parse_date_key

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ReconciledLog:
    """Result of one reconciliation pass.

    Attributes:
        records:      Date key (``YYYY-MM-DD``) → ``DayRecord``.  Always
                      contains today's key.
        latest_date:  Most recent date among real entries, or ``None``.
        today:        The "today" the map was built against.
        skipped:      Number of entries dropped for unparsable dates.
        source_count: Number of raw entries examined.
    """

    records: dict[str, DayRecord]
    latest_date: Optional[date]
    today: date
    skipped: int = 0
    source_count: int = 0

    @property
    def today_record(self) -> DayRecord:
        """Record for today (real or placeholder)."""
        return self.records[format_date_key(self.today)]

    @property
    def has_submitted_today(self) -> bool:
        """True when today holds a real (non-placeholder) record."""
        return not self.today_record.is_empty

    def real_records(self) -> list[DayRecord]:
        """Non-empty records sorted by date ascending."""
        return sorted(
            (r for r in self.records.values() if not r.is_empty),
            key=lambda r: r.log_date,
        )


def _created_at(entry: RawLogEntry) -> datetime:
    return entry.created_at if entry.created_at is not None else _EPOCH


def to_day_record(entry: RawLogEntry, day: date, today: date) -> DayRecord:
    """Project a raw entry onto its ``DayRecord``."""
    score = score_for_level(entry.stress_level)
    return DayRecord(
        log_date=day,
        score=score,
        status=status_from_score(score),
        sleep_hours=entry.sleep_hours,
        study_hours=entry.study_hours,
        extracurricular_hours=entry.extracurricular_hours,
        social_hours=entry.social_hours,
        physical_hours=entry.physical_hours,
        mood_index=entry.mood_index,
        is_empty=False,
        is_today=day == today,
        is_restored=entry.is_restored,
        log_id=entry.log_id,
    )


def reconcile_logs(entries: Iterable[RawLogEntry], today: date) -> ReconciledLog:
    """Merge raw entries into one ``DayRecord`` per calendar date.

    Args:
        entries: Raw entries in the order the log source returned them.
        today:   Reference calendar date for the placeholder and ``is_today``.

    Returns:
        ``ReconciledLog`` with the per-date map and the latest real date.
    """
    winners: dict[str, tuple[date, RawLogEntry]] = {}
    latest: Optional[date] = None
    skipped = 0
    seen = 0

    for entry in entries:
        seen += 1
        day = parse_date_key(entry.log_date)
        if day is None:
            skipped += 1
            logger.debug("Skipping log %r with unparsable date %r", entry.log_id, entry.log_date)
            continue

        if latest is None or day > latest:
            latest = day

        key = format_date_key(day)
        held = winners.get(key)
        if held is None or _created_at(entry) >= _created_at(held[1]):
            winners[key] = (day, entry)

    records = {
        key: to_day_record(entry, day, today)
        for key, (day, entry) in winners.items()
    }

    today_key = format_date_key(today)
    if today_key not in records:
        records[today_key] = DayRecord.placeholder(today)

    logger.info(
        "Reconciled %d log entries into %d days (skipped=%d, latest=%s)",
        seen, len(winners), skipped, latest,
    )
    return ReconciledLog(
        records=records,
        latest_date=latest,
        today=today,
        skipped=skipped,
        source_count=seen,
    )


def latest_known_gpa(entries: Iterable[RawLogEntry]) -> Optional[float]:
    """Return the GPA from the most recent entry that carries one.

    Entries are ranked by calendar date, then by ``created_at``.  Entries
    without a parsable date or a finite GPA are ignored.
    """
    best: Optional[tuple[date, datetime, float]] = None
    for entry in entries:
        day = parse_date_key(entry.log_date)
        if day is None or entry.gpa is None or not math.isfinite(entry.gpa):
            continue
        candidate = (day, _created_at(entry), entry.gpa)
        if best is None or candidate[:2] > best[:2]:
            best = candidate
    return best[2] if best is not None else None

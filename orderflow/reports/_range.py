from __future__ import annotations

from datetime import date, datetime, time, timedelta


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def normalize_range(
    from_: datetime | None,
    to: datetime | None,
    *,
    today: date,
    window_days: int = 30,
) -> tuple[datetime, datetime]:
    """
    Half-open [from, to) on whole UTC days.

    `to` covers its whole day (defaults to the end of `today`); `from`
    defaults to `window_days` before `to`, and so does an inverted range.
    """
    window = timedelta(days=window_days)
    to_utc = _midnight((to.date() if to is not None else today) + timedelta(days=1))
    from_utc = _midnight(from_.date()) if from_ is not None else to_utc - window
    if from_utc >= to_utc:
        from_utc = to_utc - window
    return from_utc, to_utc


__all__ = ("normalize_range",)

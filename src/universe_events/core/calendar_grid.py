from __future__ import annotations

import calendar
from datetime import MAXYEAR, date, timedelta
from typing import Dict, Iterable, List, Tuple

from ..domain import CalendarDay, Event

GRID_CELLS = 42
WEEK_LENGTH = 7
# January of year 1 starts on a Monday, so only the far end of the date range needs a bound.
LAST_MONTH = (MAXYEAR, 11)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st using Sunday=0 .. Saturday=6."""

    return (date(year, month, 1).weekday() + 1) % WEEK_LENGTH


def leading_filler_count(year: int, month: int) -> int:
    weekday = first_weekday(year, month)
    return 6 if weekday == 0 else weekday - 1


def build(year: int, month: int, events: Iterable[Event], today: date) -> List[CalendarDay]:
    """Project ``events`` onto a Monday-first 6x7 month grid."""

    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    # Trailing filler cells for the last month would fall past date.max.
    if (year, month) > LAST_MONTH:
        raise ValueError(f"months after {LAST_MONTH[0]}-{LAST_MONTH[1]:02d} cannot be shown, got {year}-{month:02d}")

    first = date(year, month, 1)
    total_days = days_in_month(year, month)
    leading = leading_filler_count(year, month)

    cells: list[CalendarDay] = []
    for offset in range(leading, 0, -1):
        cells.append(CalendarDay(date=first - timedelta(days=offset), is_current_month=False, is_today=False))

    for day in range(1, total_days + 1):
        current = date(year, month, day)
        cells.append(CalendarDay(date=current, is_current_month=True, is_today=current == today))

    after = first + timedelta(days=total_days)
    while len(cells) < GRID_CELLS:
        cells.append(CalendarDay(date=after, is_current_month=False, is_today=False))
        after += timedelta(days=1)

    by_date: Dict[date, CalendarDay] = {cell.date: cell for cell in cells}
    for event in events:
        cell = by_date.get(event.date)
        if cell is not None:
            cell.events.append(event)

    for cell in cells:
        cell.events.sort(key=lambda item: item.start_time)
    return cells


def default_selection(grid: List[CalendarDay], today: date) -> CalendarDay:
    """Today's cell when it is in the displayed month, else the month's first day."""

    for cell in grid:
        if cell.is_current_month and cell.date == today:
            return cell
    return next(cell for cell in grid if cell.is_current_month)


def weeks(grid: List[CalendarDay]) -> List[List[CalendarDay]]:
    return [grid[index : index + WEEK_LENGTH] for index in range(0, len(grid), WEEK_LENGTH)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_of(day: date) -> Tuple[int, int]:
    return day.year, day.month


__all__ = [
    "GRID_CELLS",
    "LAST_MONTH",
    "build",
    "days_in_month",
    "default_selection",
    "first_weekday",
    "leading_filler_count",
    "month_of",
    "shift_month",
    "weeks",
]

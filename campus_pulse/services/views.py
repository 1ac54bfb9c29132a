"""
Derived views over a store snapshot: filtering, sorting and aggregation.

Everything here is a pure function of its arguments. "now" is always passed
in and evaluated by the caller at request time, so an event moves from
upcoming to past on its own as time goes by.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from campus_pulse.schemas import BudgetSummary, Club, Event, Expense, MonthlyTotal, Review
from campus_pulse.schemas.common import ensure_aware
from campus_pulse.services.data_store import Snapshot

END_OF_DAY = time(23, 59, 59, 999000)


def _local(value: datetime, tz: tzinfo) -> datetime:
    return ensure_aware(value).astimezone(tz)


# -------- Events --------

def is_upcoming(event: Event, now: datetime) -> bool:
    """Upcoming includes an event starting exactly now"""
    return event.date >= ensure_aware(now)


def split_upcoming_past(events: Iterable[Event], now: datetime) -> Tuple[List[Event], List[Event]]:
    """Upcoming soonest first, past most recent first"""
    upcoming, past = [], []
    for event in events:
        (upcoming if is_upcoming(event, now) else past).append(event)
    upcoming.sort(key=lambda e: e.date)
    past.sort(key=lambda e: e.date, reverse=True)
    return upcoming, past


def matches_search(event: Event, term: Optional[str]) -> bool:
    """Case-insensitive substring match on title, description or any tag"""
    if not term:
        return True
    needle = term.lower()
    return (
        needle in event.title.lower()
        or needle in event.description.lower()
        or any(needle in tag.lower() for tag in event.tags)
    )


def in_date_range(
    event: Event,
    date_from: Optional[datetime] = None,
    date_to: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> bool:
    """`date_from` is an instant; `date_to` is a calendar day, included up to 23:59:59.999"""
    if date_from is not None and event.date < ensure_aware(date_from):
        return False
    if date_to is not None:
        if isinstance(date_to, datetime):
            date_to = _local(date_to, tz).date()
        end_of_day = datetime.combine(date_to, END_OF_DAY, tzinfo=tz)
        if event.date > end_of_day:
            return False
    return True


def clubs_by_id(clubs: Iterable[Club]) -> Dict[str, Club]:
    return {club.id: club for club in clubs}


def visible_events(snapshot: Snapshot) -> List[Event]:
    """Events whose club exists; orphans never show anywhere"""
    known = clubs_by_id(snapshot.clubs)
    return [event for event in snapshot.events if event.club_id in known]


def events_for_club(snapshot: Snapshot, club_id: str) -> List[Event]:
    if club_id not in clubs_by_id(snapshot.clubs):
        return []
    return [event for event in snapshot.events if event.club_id == club_id]


def filter_events(
    snapshot: Snapshot,
    search: Optional[str] = None,
    category: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> List[Event]:
    """Home feed: every filter must pass, soonest first.

    The category filter looks at the organising club's category. ``None`` or
    ``"All"`` disables it.
    """
    known = clubs_by_id(snapshot.clubs)
    results = []
    for event in snapshot.events:
        club = known.get(event.club_id)
        if club is None:
            continue
        if not in_date_range(event, date_from, date_to, tz):
            continue
        if category and category != "All" and club.category.value != category:
            continue
        if not matches_search(event, search):
            continue
        results.append(event)
    results.sort(key=lambda e: e.date)
    return results


def events_by_day(events: Iterable[Event], tz: tzinfo = timezone.utc) -> Dict[str, List[Event]]:
    """Calendar grouping keyed by local YYYY-MM-DD"""
    days: Dict[str, List[Event]] = defaultdict(list)
    for event in sorted(events, key=lambda e: e.date):
        days[_local(event.date, tz).strftime("%Y-%m-%d")].append(event)
    return dict(days)


def find_event(snapshot: Snapshot, club: Club, event_slug: str) -> Optional[Event]:
    for event in snapshot.events:
        if event.club_id == club.id and event.slug == event_slug:
            return event
    return None


# -------- Clubs --------

def find_club_by_slug(snapshot: Snapshot, slug: str) -> Optional[Club]:
    return next((club for club in snapshot.clubs if club.slug == slug), None)


def search_clubs(clubs: Iterable[Club], term: Optional[str]) -> List[Club]:
    """Case-insensitive match on name or description"""
    if not term:
        return list(clubs)
    needle = term.lower()
    return [
        club for club in clubs
        if needle in club.name.lower() or needle in (club.description or "").lower()
    ]


def featured_clubs(clubs: List[Club], limit: int = 4) -> List[Club]:
    return clubs[:limit]


# -------- Reviews --------

def average_rating(reviews: List[Review]) -> Optional[float]:
    """Mean rating to one decimal place; None when there are no reviews"""
    if not reviews:
        return None
    return round(sum(r.rating for r in reviews) / len(reviews), 1)


def sorted_reviews(reviews: Iterable[Review]) -> List[Review]:
    return sorted(reviews, key=lambda r: r.date, reverse=True)


# -------- Budget --------

def _same_month(a: datetime, b: datetime) -> bool:
    return a.year == b.year and a.month == b.month


def spent_this_month(expenses: Iterable[Expense], now: datetime, tz: tzinfo = timezone.utc) -> float:
    local_now = _local(now, tz)
    return sum(e.amount for e in expenses if _same_month(_local(e.date, tz), local_now))


def budget_summary(club: Club, now: datetime, tz: tzinfo = timezone.utc) -> BudgetSummary:
    budget = club.monthly_budget
    spent = spent_this_month(club.expenses, now, tz)
    progress = (spent / budget) * 100 if budget > 0 else 0
    return BudgetSummary(
        monthly_budget=budget,
        spent=spent,
        remaining=budget - spent,
        progress=progress,
    )


def monthly_history(
    expenses: Iterable[Expense],
    now: datetime,
    tz: tzinfo = timezone.utc,
    months: int = 6,
) -> List[MonthlyTotal]:
    """Totals for the last `months` calendar months including this one, oldest first"""
    local_now = _local(now, tz)
    buckets: List[Tuple[int, int]] = []
    year, month = local_now.year, local_now.month
    for _ in range(months):
        buckets.append((year, month))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    buckets.reverse()

    totals: Dict[Tuple[int, int], float] = {bucket: 0 for bucket in buckets}
    for expense in expenses:
        local = _local(expense.date, tz)
        key = (local.year, local.month)
        if key in totals:
            totals[key] += expense.amount

    return [
        MonthlyTotal(
            month=f"{y:04d}-{m:02d}",
            label=date(y, m, 1).strftime("%b"),
            total=totals[(y, m)],
        )
        for y, m in buckets
    ]


def sorted_expenses(expenses: Iterable[Expense]) -> List[Expense]:
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def expense_event_titles(expenses: Iterable[Expense], events: Iterable[Event]) -> Dict[str, Optional[str]]:
    """Expense id to the linked event's title; None means no event linked"""
    titles = {event.id: event.title for event in events}
    return {e.id: titles.get(e.event_id) if e.event_id else None for e in expenses}

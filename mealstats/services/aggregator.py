"""
services/aggregator.py
----------------------
Turns fetched order rows into dashboard metrics.

Pure functions over an in-memory, already-fetched row list: no I/O, no
module-level state, no mutation of the input. Calling aggregate() twice on
the same rows yields identical bundles.

Vocabulary:
  eligible    → approved | prepared | delivered. Only these count as
                fulfilled intent (today's orders, monthly orders, revenue,
                top meal).
  dispatched  → prepared | delivered (per-company rollups).
  pending     → two meanings, kept apart on purpose:
                  MetricsBundle.pending_orders   literal status "pending",
                                                 over every input row,
                                                 ignoring any date filter;
                  CompanyRollup.pending_count    order_count minus
                                                 dispatched_count.

Rows whose lunch option is missing still count toward raw totals; they are
skipped only where a price or a name is required.
"""

import datetime
from typing import Iterable, Optional, Sequence

from mealstats.models.order import OrderStatus
from mealstats.schemas.orders import OrderRow
from mealstats.schemas.stats import (
    NO_DATA,
    CompanyRollup,
    DishCount,
    MetricsBundle,
    ProviderSummary,
    StatusCounts,
    TimelinePoint,
    TopMeal,
)
from mealstats.schemas.window import DateWindow
from mealstats.services.date_window import trailing_days
from mealstats.services.subsidy import compute_price

ELIGIBLE_STATUSES = frozenset(
    {OrderStatus.approved, OrderStatus.prepared, OrderStatus.delivered}
)
DISPATCHED_STATUSES = frozenset({OrderStatus.prepared, OrderStatus.delivered})

UNKNOWN_COMPANY = "Unknown"


def is_eligible(row: OrderRow) -> bool:
    return row.status in ELIGIBLE_STATUSES


def aggregate(
    rows: Sequence[OrderRow],
    window: DateWindow,
    today: datetime.date,
    *,
    include_rollups: bool = False,
    companies: Optional[Sequence[tuple[str, str]]] = None,
    top_dishes_limit: int = 5,
    timeline_days: int = 7,
) -> MetricsBundle:
    """
    Build the full metrics bundle.

    Args:
        rows: every fetched order for the scope. Rows outside `window` still
            feed pending_orders and today's figures.
        window: inclusive range for the monthly figures and rollups.
        today: the reference day for the "today" cards.
        include_rollups: also compute per-company rollups.
        companies: (id, name) pairs in display order, used for rollups.
    """
    today_eligible = [r for r in rows if r.date == today and is_eligible(r)]
    in_window = [r for r in rows if window.contains(r.date)]
    window_eligible = [r for r in in_window if is_eligible(r)]

    bundle = MetricsBundle(
        orders_today=len(today_eligible),
        total_meals_today=len(today_eligible),  # one meal per order
        companies_with_orders_today=len({r.company_id for r in today_eligible}),
        top_ordered_meal=top_ordered_meal(today_eligible),
        pending_orders=count_pending(rows),
        monthly_orders=len(window_eligible),
        monthly_revenue=revenue(window_eligible),
        window=window,
        status_counts=status_counts(in_window),
        top_dishes=top_dishes(window_eligible, top_dishes_limit),
        orders_timeline=orders_timeline(rows, today, timeline_days),
    )
    if include_rollups:
        bundle.company_rollups = company_rollups(in_window, companies or [])
    return bundle


def count_pending(rows: Iterable[OrderRow]) -> int:
    """Orders still waiting for a supervisor, whatever their date."""
    return sum(1 for r in rows if r.status is OrderStatus.pending)


def revenue(rows: Iterable[OrderRow]) -> float:
    """
    Sum of what employees pay for `rows`, after their company's subsidy.
    Uses the lunch option's current price; rows without one add nothing.
    """
    total = 0.0
    for row in rows:
        if row.lunch_option is None:
            continue
        total += compute_price(row.lunch_option.price, row.subsidy).payable
    return total


def top_ordered_meal(rows: Iterable[OrderRow]) -> TopMeal:
    """
    Most frequent lunch option among `rows`.

    Ties go to the option seen first: the running best is only replaced on
    a strictly greater count.
    """
    counter: dict[str, list] = {}
    for row in rows:
        if row.lunch_option is None:
            continue
        entry = counter.setdefault(row.lunch_option.id, [0, row.lunch_option.name])
        entry[0] += 1

    best_count, best_name = 0, NO_DATA
    for count, name in counter.values():
        if count > best_count:
            best_count, best_name = count, name
    return TopMeal(name=best_name, count=best_count)


def top_dishes(rows: Iterable[OrderRow], limit: int) -> list[DishCount]:
    counter: dict[str, DishCount] = {}
    for row in rows:
        if row.lunch_option is None:
            continue
        option = row.lunch_option
        current = counter.get(option.id)
        counter[option.id] = DishCount(
            lunch_option_id=option.id,
            name=current.name if current else option.name,
            count=(current.count if current else 0) + 1,
        )
    # sorted() is stable: equal counts keep first-seen order
    ranked = sorted(counter.values(), key=lambda dish: dish.count, reverse=True)
    return ranked[:max(limit, 0)]


def status_counts(rows: Iterable[OrderRow]) -> StatusCounts:
    counts = {status.value: 0 for status in OrderStatus}
    for row in rows:
        counts[row.status.value] += 1
    return StatusCounts(**counts)


def orders_timeline(
    rows: Iterable[OrderRow], today: datetime.date, days: int
) -> list[TimelinePoint]:
    """Orders per day (any status) over the last `days` days, oldest first."""
    per_day: dict[datetime.date, int] = {}
    for row in rows:
        per_day[row.date] = per_day.get(row.date, 0) + 1
    return [
        TimelinePoint(date=day, orders=per_day.get(day, 0))
        for day in trailing_days(today, days)
    ]


def company_rollups(
    rows: Iterable[OrderRow],
    companies: Sequence[tuple[str, str]],
) -> list[CompanyRollup]:
    """
    Per-company order summary for the rows given (callers pass window rows).

    Companies without orders are left out. Result is sorted by pending_count,
    highest first; ties keep the order of `companies`, then first-seen order
    for ids not listed there.
    """
    names = dict(companies)
    grouped: dict[str, list[OrderRow]] = {cid: [] for cid, _ in companies}
    for row in rows:
        grouped.setdefault(row.company_id, []).append(row)

    rollups = [
        summarize_company(cid, names.get(cid, UNKNOWN_COMPANY), company_rows)
        for cid, company_rows in grouped.items()
        if company_rows
    ]
    rollups.sort(key=lambda rollup: rollup.pending_count, reverse=True)
    return rollups


def summarize_company(company_id: str, name: str, rows: Sequence[OrderRow]) -> CompanyRollup:
    dispatched = sum(1 for r in rows if r.status in DISPATCHED_STATUSES)
    return CompanyRollup(
        company_id=company_id,
        name=name,
        order_count=len(rows),
        distinct_user_count=len({r.user_id for r in rows}),
        dispatched_count=dispatched,
        pending_count=len(rows) - dispatched,
    )


def summarize_providers(providers, companies) -> list[ProviderSummary]:
    """
    Subsidy overview per provider.

    Args:
        providers: objects with `id` and `business_name`.
        companies: objects with `provider_id`, `subsidy_percentage` and
            `fixed_subsidy_amount`.
    """
    by_provider: dict[str, list] = {}
    for company in companies:
        by_provider.setdefault(company.provider_id, []).append(company)

    summaries = []
    for provider in providers:
        owned = by_provider.get(provider.id, [])
        count = len(owned)
        avg_subsidy = (
            sum(float(c.subsidy_percentage or 0) for c in owned) / count if count else 0.0
        )
        summaries.append(
            ProviderSummary(
                provider_id=provider.id,
                name=provider.business_name,
                company_count=count,
                avg_subsidy=avg_subsidy,
                total_fixed_amount=sum(float(c.fixed_subsidy_amount or 0) for c in owned),
            )
        )
    return summaries

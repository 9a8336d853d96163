import datetime
from types import SimpleNamespace

from mealstats.schemas.orders import LunchOptionRef, OrderRow, SubsidyConfig
from mealstats.services import aggregator
from mealstats.services.date_window import build_window

TODAY = datetime.date(2024, 5, 15)
MONTH = build_window("month_to_date", TODAY)

HALF = SubsidyConfig(percentage=50)
MEAL_A = LunchOptionRef(id="opt-a", name="A", price=10)
MEAL_B = LunchOptionRef(id="opt-b", name="B", price=8)


def make_row(
    order_id,
    *,
    company="c1",
    user="u1",
    day=TODAY,
    status="approved",
    option=MEAL_A,
    subsidy=HALF,
):
    return OrderRow(
        id=order_id,
        company_id=company,
        user_id=user,
        date=day,
        status=status,
        lunch_option=option,
        subsidy=subsidy,
    )


def test_empty_input_yields_zero_bundle():
    bundle = aggregator.aggregate([], MONTH, TODAY)

    assert bundle.orders_today == 0
    assert bundle.total_meals_today == 0
    assert bundle.companies_with_orders_today == 0
    assert bundle.top_ordered_meal.name == "no data"
    assert bundle.top_ordered_meal.count == 0
    assert bundle.pending_orders == 0
    assert bundle.monthly_orders == 0
    assert bundle.monthly_revenue == 0
    assert bundle.status_counts.total == 0
    assert bundle.top_dishes == []


def test_concrete_scenario_with_half_subsidy():
    rows = [
        make_row("o1", option=MEAL_A, user="u1"),
        make_row("o2", option=MEAL_B, user="u2"),
        make_row("o3", option=MEAL_A, user="u3"),
    ]

    bundle = aggregator.aggregate(rows, MONTH, TODAY)

    assert bundle.orders_today == 3
    assert bundle.total_meals_today == 3
    assert bundle.top_ordered_meal.name == "A"
    assert bundle.top_ordered_meal.count == 2
    assert aggregator.revenue(rows) == 14
    assert bundle.monthly_revenue == 14


def test_only_eligible_statuses_count_as_orders_today():
    rows = [
        make_row("o1", status="approved"),
        make_row("o2", status="prepared"),
        make_row("o3", status="delivered"),
        make_row("o4", status="pending"),
        make_row("o5", status="rejected"),
    ]

    bundle = aggregator.aggregate(rows, MONTH, TODAY)

    assert bundle.orders_today == 3
    assert bundle.total_meals_today == bundle.orders_today
    assert bundle.monthly_orders == 3
    assert bundle.monthly_revenue == 15


def test_companies_with_orders_today_counts_distinct_eligible_companies():
    rows = [
        make_row("o1", company="c1"),
        make_row("o2", company="c1"),
        make_row("o3", company="c2"),
        make_row("o4", company="c3", status="pending"),
        make_row("o5", company="c4", day=TODAY - datetime.timedelta(days=1)),
    ]

    assert aggregator.aggregate(rows, MONTH, TODAY).companies_with_orders_today == 2


def test_top_meal_tie_goes_to_first_seen_option():
    rows = [
        make_row("o1", option=MEAL_B),
        make_row("o2", option=MEAL_A),
        make_row("o3", option=MEAL_A),
        make_row("o4", option=MEAL_B),
        make_row("o5", option=MEAL_B),
        make_row("o6", option=MEAL_A),
    ]

    top = aggregator.aggregate(rows, MONTH, TODAY).top_ordered_meal

    assert (top.name, top.count) == ("B", 3)


def test_top_meal_only_considers_today():
    rows = [
        make_row("o1", option=MEAL_B, day=TODAY - datetime.timedelta(days=2)),
        make_row("o2", option=MEAL_B, day=TODAY - datetime.timedelta(days=2)),
        make_row("o3", option=MEAL_A),
    ]

    top = aggregator.aggregate(rows, MONTH, TODAY).top_ordered_meal

    assert (top.name, top.count) == ("A", 1)


def test_pending_orders_ignore_the_window():
    rows = [
        make_row("o1", status="pending", day=datetime.date(2023, 12, 1)),
        make_row("o2", status="pending", day=TODAY),
        make_row("o3", status="pending", day=datetime.date(2024, 9, 30)),
        make_row("o4", status="approved"),
    ]
    narrow = build_window("today", TODAY)
    wide = build_window("custom", TODAY, "2020-01-01", "2030-01-01")

    assert aggregator.aggregate(rows, narrow, TODAY).pending_orders == 3
    assert aggregator.aggregate(rows, wide, TODAY).pending_orders == 3


def test_monthly_figures_respect_window_bounds():
    rows = [
        make_row("o1", day=datetime.date(2024, 4, 30)),
        make_row("o2", day=datetime.date(2024, 5, 1)),
        make_row("o3", day=TODAY),
        make_row("o4", day=datetime.date(2024, 5, 16)),
    ]

    bundle = aggregator.aggregate(rows, MONTH, TODAY)

    assert bundle.monthly_orders == 2
    assert bundle.monthly_revenue == 10


def test_orders_without_lunch_option_count_but_earn_nothing():
    rows = [
        make_row("o1", option=None),
        make_row("o2", option=MEAL_B),
    ]

    bundle = aggregator.aggregate(rows, MONTH, TODAY)

    assert bundle.orders_today == 2
    assert bundle.monthly_orders == 2
    assert bundle.monthly_revenue == 4
    assert (bundle.top_ordered_meal.name, bundle.top_ordered_meal.count) == ("B", 1)


def test_revenue_uses_each_rows_company_subsidy():
    rows = [
        make_row("o1", option=MEAL_A, subsidy=SubsidyConfig(fixed_amount=3)),
        make_row("o2", option=MEAL_A, subsidy=SubsidyConfig(percentage=100)),
        make_row("o3", option=MEAL_A, subsidy=None),
    ]

    assert aggregator.aggregate(rows, MONTH, TODAY).monthly_revenue == 17


def test_status_counts_add_up_to_window_total():
    rows = [
        make_row("o1", status="pending"),
        make_row("o2", status="approved"),
        make_row("o3", status="rejected"),
        make_row("o4", status="prepared"),
        make_row("o5", status="delivered"),
        make_row("o6", status="delivered", day=datetime.date(2024, 3, 1)),
    ]

    counts = aggregator.aggregate(rows, MONTH, TODAY).status_counts

    assert counts.total == 5
    assert counts.pending + counts.approved + counts.prepared + counts.delivered + counts.rejected == 5
    assert counts.delivered == 1


def test_company_rollups_split_dispatched_and_residual_pending():
    rows = [
        make_row("o1", company="c1", user="u1", status="pending"),
        make_row("o2", company="c1", user="u1", status="approved"),
        make_row("o3", company="c1", user="u2", status="rejected"),
        make_row("o4", company="c1", user="u3", status="prepared"),
        make_row("o5", company="c2", user="u4", status="delivered"),
    ]
    companies = [("c1", "Acme"), ("c2", "Globex"), ("c3", "Initech")]

    bundle = aggregator.aggregate(rows, MONTH, TODAY, include_rollups=True, companies=companies)
    rollups = {r.company_id: r for r in bundle.company_rollups}

    assert set(rollups) == {"c1", "c2"}
    acme = rollups["c1"]
    assert acme.name == "Acme"
    assert acme.order_count == 4
    assert acme.distinct_user_count == 3
    assert acme.dispatched_count == 1
    assert acme.pending_count == 3
    for rollup in bundle.company_rollups:
        assert rollup.dispatched_count + rollup.pending_count == rollup.order_count


def test_company_rollups_sorted_by_pending_then_listing_order():
    rows = [
        make_row("o1", company="c1", status="delivered"),
        make_row("o2", company="c2", status="pending"),
        make_row("o3", company="c3", status="pending"),
        make_row("o4", company="c9", status="approved"),
    ]
    companies = [("c1", "Acme"), ("c2", "Globex"), ("c3", "Initech")]

    rollups = aggregator.company_rollups(rows, companies)

    assert [r.company_id for r in rollups] == ["c2", "c3", "c9", "c1"]
    assert rollups[2].name == "Unknown"


def test_top_dishes_ranked_and_limited():
    meal_c = LunchOptionRef(id="opt-c", name="C", price=5)
    rows = [
        make_row("o1", option=MEAL_A),
        make_row("o2", option=MEAL_B),
        make_row("o3", option=MEAL_B),
        make_row("o4", option=meal_c),
        make_row("o5", option=MEAL_A, status="pending"),
    ]

    dishes = aggregator.aggregate(rows, MONTH, TODAY, top_dishes_limit=2).top_dishes

    assert [(d.name, d.count) for d in dishes] == [("B", 2), ("A", 1)]


def test_orders_timeline_covers_trailing_days():
    rows = [
        make_row("o1", day=TODAY, status="pending"),
        make_row("o2", day=TODAY - datetime.timedelta(days=1)),
        make_row("o3", day=TODAY - datetime.timedelta(days=1)),
        make_row("o4", day=TODAY - datetime.timedelta(days=30)),
    ]

    timeline = aggregator.aggregate(rows, MONTH, TODAY, timeline_days=7).orders_timeline

    assert len(timeline) == 7
    assert timeline[-1].date == TODAY
    assert timeline[-1].orders == 1
    assert timeline[-2].orders == 2
    assert sum(point.orders for point in timeline) == 3


def test_duplicate_rows_are_counted_as_given():
    row = make_row("o1")

    bundle = aggregator.aggregate([row, row], MONTH, TODAY)

    assert bundle.orders_today == 2
    assert bundle.monthly_revenue == 10


def test_aggregate_is_idempotent():
    rows = [
        make_row("o1", option=MEAL_A),
        make_row("o2", option=MEAL_B, status="pending"),
        make_row("o3", option=MEAL_B, company="c2", status="delivered"),
    ]
    companies = [("c1", "Acme"), ("c2", "Globex")]

    first = aggregator.aggregate(rows, MONTH, TODAY, include_rollups=True, companies=companies)
    second = aggregator.aggregate(rows, MONTH, TODAY, include_rollups=True, companies=companies)

    assert first.model_dump_json() == second.model_dump_json()


def test_bundle_serialises_with_camel_case_names():
    payload = aggregator.aggregate([], MONTH, TODAY).model_dump(by_alias=True, mode="json")

    assert payload["ordersToday"] == 0
    assert payload["totalMealsToday"] == 0
    assert payload["companiesWithOrdersToday"] == 0
    assert payload["topOrderedMeal"] == {"name": "no data", "count": 0}
    assert payload["pendingOrders"] == 0
    assert payload["monthlyOrders"] == 0
    assert payload["monthlyRevenue"] == 0


def test_summarize_providers():
    providers = [
        SimpleNamespace(id="p1", business_name="Cocina Uno"),
        SimpleNamespace(id="p2", business_name="Empty Kitchen"),
    ]
    companies = [
        SimpleNamespace(provider_id="p1", subsidy_percentage=20, fixed_subsidy_amount=0),
        SimpleNamespace(provider_id="p1", subsidy_percentage=40, fixed_subsidy_amount=3.5),
    ]

    summaries = aggregator.summarize_providers(providers, companies)

    assert summaries[0].company_count == 2
    assert summaries[0].avg_subsidy == 30
    assert summaries[0].total_fixed_amount == 3.5
    assert summaries[1].company_count == 0
    assert summaries[1].avg_subsidy == 0

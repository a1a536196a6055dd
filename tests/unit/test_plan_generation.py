"""路线优化与预算计算单元测试"""

import pytest

from devinn.schemas.content import ActivityType
from devinn.schemas.travel_plan import DailySummary, TravelActivity, TravelDay, TravelPlan
from devinn.services.plan_generation import (
    BookingSuggestionService,
    BudgetCalculator,
    RouteOptimizer,
    estimate_activity_duration,
    minutes_to_time_string,
)
from devinn.tools.geo import HaversineDistance


def make_activity(title, coordinates=(0.0, 0.0), activity_type=ActivityType.ATTRACTION, cost=0):
    return TravelActivity(
        id=title,
        title=title,
        type=activity_type,
        estimated_cost=cost,
        location={"name": title, "coordinates": coordinates},
    )


def to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class TestRouteOptimizer:
    """最近邻路线优化测试"""

    def test_single_activity_unchanged(self):
        activity = make_activity("a", activity_type=ActivityType.RESTAURANT)
        assert RouteOptimizer().optimize_route([activity]) == [activity]
        assert RouteOptimizer().optimize_route([]) == []

    def test_nearest_neighbour_order(self):
        activities = [
            make_activity("a", (0, 0)),
            make_activity("far", (10, 10)),
            make_activity("near", (1, 1)),
        ]
        ordered = RouteOptimizer().optimize_route(activities)
        assert [a.title for a in ordered] == ["a", "near", "far"]

    def test_output_is_permutation(self):
        activities = [make_activity(str(i), (i % 3, i % 5)) for i in range(8)]
        ordered = RouteOptimizer().optimize_route(activities)
        assert sorted(a.id for a in ordered) == sorted(a.id for a in activities)
        assert [a.order for a in ordered] == list(range(1, 9))

    def test_ties_prefer_earlier(self):
        activities = [make_activity("start", (0, 0)), make_activity("x", (1, 0)), make_activity("y", (-1, 0))]
        ordered = RouteOptimizer().optimize_route(activities)
        assert [a.title for a in ordered] == ["start", "x", "y"]

    def test_start_location(self):
        activities = [make_activity("a", (0, 0)), make_activity("b", (5, 5))]
        ordered = RouteOptimizer().optimize_route(activities, start_location=(5, 5))
        assert [a.title for a in ordered] == ["b", "a"]

    def test_haversine_metric(self):
        activities = [make_activity("a", (35.0, 139.0)), make_activity("b", (36.0, 139.0)), make_activity("c", (35.1, 139.0))]
        ordered = RouteOptimizer(HaversineDistance()).optimize_route(activities)
        assert [a.title for a in ordered] == ["a", "c", "b"]

    def test_time_schedule(self):
        activities = [
            make_activity("景点", activity_type=ActivityType.ATTRACTION),
            make_activity("午餐", activity_type=ActivityType.RESTAURANT),
            make_activity("交通", activity_type=ActivityType.TRANSPORT),
        ]
        scheduled = RouteOptimizer.optimize_time_schedule(activities)

        assert scheduled[0].start_time == "09:00"
        for previous, current in zip(scheduled, scheduled[1:]):
            assert to_minutes(current.start_time) - to_minutes(previous.end_time) == 30
        for activity in scheduled:
            duration = to_minutes(activity.end_time) - to_minutes(activity.start_time)
            assert duration == estimate_activity_duration(activity.type)

    def test_input_not_mutated(self):
        activities = [make_activity("a", (0, 0)), make_activity("b", (1, 1))]
        RouteOptimizer().optimize_route(activities)
        assert activities[0].start_time == "09:00"
        assert activities[1].order == 1

    def test_time_string(self):
        assert minutes_to_time_string(540) == "09:00"
        assert minutes_to_time_string(1439) == "23:59"


class TestBudgetCalculator:
    """预算计算测试"""

    def test_estimate_budget(self):
        plan = TravelPlan(
            title="计划",
            destination="东京",
            days=[TravelDay(activities=[
                make_activity("酒店", activity_type=ActivityType.HOTEL, cost=500),
                make_activity("餐厅", activity_type=ActivityType.RESTAURANT, cost=200),
            ])],
        )
        budget = BudgetCalculator.estimate_budget(plan, 2)

        assert budget.breakdown.accommodation == 1000
        assert budget.breakdown.food == 400
        assert budget.breakdown.activities == 0
        assert budget.breakdown.transport == 0
        assert (budget.min, budget.max) == (1120, 1680)

    def test_empty_plan_budget(self):
        budget = BudgetCalculator.estimate_budget(TravelPlan(title="计划", destination="东京"), 3)
        assert (budget.min, budget.max) == (0, 0)

    def test_recompute_daily_summary(self):
        day = TravelDay(
            activities=[make_activity("a", cost=120), make_activity("b", cost=80)],
            daily_summary=DailySummary(total_cost=9999, highlights=["夜景"]),
        )
        updated = BudgetCalculator.recompute_daily_summary(day)

        assert updated.daily_summary.total_cost == 200
        assert updated.daily_summary.highlights == ["夜景"]
        assert day.daily_summary.total_cost == 9999


class TestBookingSuggestions:
    """航班酒店建议测试"""

    @pytest.mark.asyncio
    async def test_prices_scale(self, sample_plan, sample_requirements):
        service = BookingSuggestionService()
        flights = await service.generate_flight_suggestions(sample_plan, sample_requirements)
        hotels = await service.generate_hotel_suggestions(sample_plan, sample_requirements)

        assert flights[0].flight_number == "CA123"
        assert flights[0].price["totalPrice"] == 5000
        assert hotels[0].id == "hotel-1"

    @pytest.mark.asyncio
    async def test_default_date(self, sample_requirements):
        plan = TravelPlan(title="计划", destination="东京")
        flights = await BookingSuggestionService().generate_flight_suggestions(plan, sample_requirements)
        assert flights[0].departure.date == "2024-01-01"

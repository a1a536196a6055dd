"""旅行计划生成器单元测试"""

import json
from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from devinn.core.exceptions import EmptyContentError, MalformedModelOutputError, PlanAdjustmentError, PlanGenerationError
from devinn.services.ai.content_analyzer import ContentAnalyzer
from devinn.services.ai.travel_plan_generator import TravelPlanGenerator


def make_generator(llm, booking=None):
    return TravelPlanGenerator(ContentAnalyzer(llm), llm, booking=booking)


class TestGenerateTravelPlan:
    """完整生成流程测试"""

    @pytest.mark.asyncio
    async def test_empty_contents(self, make_llm, sample_requirements):
        llm = make_llm()
        with pytest.raises(EmptyContentError):
            await make_generator(llm).generate_travel_plan([], sample_requirements)
        assert llm.call_count == 0

    @pytest.mark.asyncio
    async def test_full_pipeline(self, make_llm, analysis_json, plan_json, sample_content, sample_requirements):
        llm = make_llm([analysis_json, plan_json])

        plan = await make_generator(llm).generate_travel_plan([sample_content], sample_requirements)

        assert llm.call_count == 2
        # 空的旅行风格由分析结果补全，原需求不变
        assert "美食, 休闲" in llm.prompts[1]
        assert sample_requirements.travel_style == []

        first_day = plan.days[0]
        assert [a.title for a in first_day.activities] == ["浅草寺", "一兰拉面", "入住酒店"]
        assert [a.order for a in first_day.activities] == [1, 2, 3]
        assert [(a.start_time, a.end_time) for a in first_day.activities] == [
            ("09:00", "12:00"), ("12:30", "14:00"), ("14:30", "15:30"),
        ]
        assert first_day.daily_summary.total_cost == 600
        assert plan.days[1].daily_summary.total_cost == 300

        budget = plan.estimated_budget
        assert budget.breakdown.accommodation == 1000
        assert budget.breakdown.food == 200
        assert budget.breakdown.activities == 600
        assert (budget.min, budget.max) == (1440, 2160)

        assert plan.flights[0].price["totalPrice"] == 5000
        assert plan.flights[0].departure.date == "2024-05-01"
        assert len(plan.hotels) == 1

    @pytest.mark.asyncio
    async def test_booking_failure_keeps_plan(self, make_llm, analysis_json, plan_json, sample_content, sample_requirements):
        booking = MagicMock()
        booking.generate_flight_suggestions = AsyncMock(side_effect=RuntimeError("航班接口不可用"))
        llm = make_llm([analysis_json, plan_json])

        plan = await make_generator(llm, booking).generate_travel_plan([sample_content], sample_requirements)

        assert plan.flights == []
        assert plan.activity_count == 4

    @pytest.mark.asyncio
    async def test_malformed_plan(self, make_llm, analysis_json, sample_content, sample_requirements):
        llm = make_llm([analysis_json, '{"title": "缺少目的地"}'])
        with pytest.raises(MalformedModelOutputError):
            await make_generator(llm).generate_travel_plan([sample_content], sample_requirements)

    @pytest.mark.asyncio
    async def test_analysis_failure_is_wrapped(self, make_llm, sample_content, sample_requirements):
        llm = make_llm([RuntimeError("503")])
        with pytest.raises(PlanGenerationError, match="旅行计划生成失败"):
            await make_generator(llm).generate_travel_plan([sample_content], sample_requirements)


class TestAdjustTravelPlan:
    """行程调整测试"""

    @pytest.mark.asyncio
    async def test_identity_preserved(self, make_llm, plan_json, sample_plan):
        original = sample_plan.model_copy(update={"updated_at": datetime.now() + timedelta(days=1)})

        adjusted = await make_generator(make_llm([plan_json])).adjust_travel_plan(original, "第二天多安排购物")

        assert adjusted.id == "plan-1"
        assert adjusted.note_id == "note-1"
        assert adjusted.created_at == original.created_at
        assert adjusted.updated_at > original.updated_at

    @pytest.mark.asyncio
    async def test_zero_budget_is_estimated(self, make_llm, plan_json, sample_plan):
        adjusted = await make_generator(make_llm([plan_json])).adjust_travel_plan(sample_plan, "调整")
        assert (adjusted.estimated_budget.min, adjusted.estimated_budget.max) == (1440, 2160)

    @pytest.mark.asyncio
    async def test_daily_total_follows_activities(self, make_llm, sample_plan):
        raw = json.dumps({
            "title": "东京一日游",
            "destination": "东京",
            "days": [{
                "activities": [
                    {"type": "HOTEL", "title": "入住酒店", "estimatedCost": 500},
                    {"type": "RESTAURANT", "title": "寿司", "estimatedCost": 200},
                ],
                "dailySummary": {"totalCost": 99999, "highlights": ["寿司"]},
            }],
        }, ensure_ascii=False)

        adjusted = await make_generator(make_llm([raw])).adjust_travel_plan(sample_plan, "只留一天")

        summary = adjusted.days[0].daily_summary
        assert summary.total_cost == 700
        assert summary.highlights == ["寿司"]

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, make_llm, sample_plan):
        with pytest.raises(PlanAdjustmentError):
            await make_generator(make_llm([RuntimeError("503")])).adjust_travel_plan(sample_plan, "调整")


class TestDayPlan:
    """单日行程测试"""

    @pytest.mark.asyncio
    async def test_defaults(self, make_llm, sample_requirements):
        generator = make_generator(make_llm(['{"activities": []}']))
        day = await generator.generate_day_plan(1, "美食", ["筑地市场"], ["品尝拉面"], sample_requirements)

        assert day.day_number == 1
        assert day.title == "旅行日"
        assert day.theme == "探索"
        assert day.date == date.today().isoformat()

    @pytest.mark.asyncio
    async def test_non_object_output(self, make_llm, sample_requirements):
        generator = make_generator(make_llm(['["第一天"]']))
        with pytest.raises(MalformedModelOutputError):
            await generator.generate_day_plan(1, "美食", [], [], sample_requirements)


class TestHelpers:
    def test_estimate_budget_uses_travelers(self, make_llm, sample_plan, sample_requirements):
        budget = make_generator(make_llm()).estimate_budget(
            sample_plan, sample_requirements.model_copy(update={"travelers": 1})
        )
        assert budget.max == 1080

    def test_next_timestamp_is_strictly_newer(self):
        future = datetime.now() + timedelta(hours=1)
        assert TravelPlanGenerator._next_timestamp(future) == future + timedelta(microseconds=1)
        assert TravelPlanGenerator._next_timestamp(None) <= datetime.now()

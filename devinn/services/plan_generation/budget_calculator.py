"""
预算计算相关功能
"""
from typing import Iterable
from loguru import logger

from devinn.schemas.content import ActivityType
from devinn.schemas.travel_plan import BudgetBreakdown, EstimatedBudget, TravelActivity, TravelDay, TravelPlan

# 预算区间相对活动费用合计的浮动比例
MIN_BUDGET_RATIO = 0.8
MAX_BUDGET_RATIO = 1.2  # 20% 额外费用


class BudgetCalculator:
    """预算计算器"""

    @staticmethod
    def sum_activity_costs(activities: Iterable[TravelActivity]) -> float:
        """单人活动费用合计"""
        return sum(activity.estimated_cost for activity in activities)

    @staticmethod
    def recompute_daily_summary(day: TravelDay) -> TravelDay:
        """按当日活动重新计算 dailySummary.totalCost"""
        summary = day.daily_summary.model_copy(
            update={"total_cost": BudgetCalculator.sum_activity_costs(day.activities)}
        )
        return day.model_copy(update={"daily_summary": summary})

    @staticmethod
    def estimate_budget(plan: TravelPlan, travelers: int) -> EstimatedBudget:
        """
        估算旅行预算

        每个活动的人均费用乘以出行人数后按类型归类：
        HOTEL 计入住宿，RESTAURANT 计入餐饮，TRANSPORT 计入交通，其余计入活动。
        最低预算为合计的 80%，最高预算为合计的 120%。
        """
        travelers = max(1, int(travelers or 1))
        accommodation = food = activities = transport = 0.0

        for day in plan.days:
            for activity in day.activities:
                cost = activity.estimated_cost * travelers
                if activity.type == ActivityType.HOTEL:
                    accommodation += cost
                elif activity.type == ActivityType.RESTAURANT:
                    food += cost
                elif activity.type == ActivityType.TRANSPORT:
                    transport += cost
                else:
                    activities += cost

        total = accommodation + food + activities + transport
        logger.debug(f"预算估算：{travelers}人，活动费用合计={total:.0f}元")

        return EstimatedBudget(
            min=round(total * MIN_BUDGET_RATIO),
            max=round(total * MAX_BUDGET_RATIO),
            breakdown=BudgetBreakdown(
                accommodation=accommodation,
                food=food,
                activities=activities,
                transport=transport,
            ),
        )

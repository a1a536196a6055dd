"""
旅行计划生成器
基于提取的内容和用户需求，生成个性化的旅行计划
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple
from loguru import logger

from devinn.core.exceptions import EmptyContentError, MalformedModelOutputError, PlanAdjustmentError, PlanGenerationError
from devinn.schemas.analysis import AnalysisResult
from devinn.schemas.content import ExtractedContent
from devinn.schemas.travel_plan import EstimatedBudget, TravelActivity, TravelDay, TravelPlan, UserRequirements
from devinn.services.ai.content_analyzer import ContentAnalyzer
from devinn.services.ai.gemini_service import format_travel_plan
from devinn.services.ai.output_parser import parse_json_output, validate_model_output
from devinn.services.ai.prompt_templates import PromptTemplates
from devinn.services.plan_generation import BookingSuggestionService, BudgetCalculator, RouteOptimizer
from devinn.tools.gemini_client import LLMClient
from devinn.tools.text_utils import get_error_message

# 调整行程时原计划不记录出行人数
DEFAULT_TRAVELERS = 2
DAY_PLAN_FORMAT_ERROR = "每日计划格式错误"


class TravelPlanGenerator:
    """旅行计划生成器"""

    def __init__(
        self,
        analyzer: ContentAnalyzer,
        llm: LLMClient,
        route_optimizer: Optional[RouteOptimizer] = None,
        booking: Optional[BookingSuggestionService] = None,
    ):
        self.analyzer = analyzer
        self.llm = llm
        self.route_optimizer = route_optimizer or RouteOptimizer()
        self.booking = booking or BookingSuggestionService()

    async def generate_travel_plan(
        self,
        contents: Sequence[ExtractedContent],
        requirements: UserRequirements,
    ) -> TravelPlan:
        """
        生成完整的旅行计划

        1. 分析内容获取洞察
        2. 用分析结果补全用户需求
        3. 生成基础旅行计划
        4. 优化每日路线并重新计算预算
        5. 添加航班和酒店建议
        """
        if not contents:
            raise EmptyContentError("需要至少一个内容来源来生成旅行计划")

        logger.info(f"🗺️ 开始生成旅行计划: 内容 {len(contents)} 条, {requirements.duration}天, {requirements.travelers}人")

        try:
            analysis = await self.analyzer.analyze_contents(contents)
            enhanced = self.enhance_requirements(requirements, analysis)
            base_plan = await self.generate_base_plan(contents, enhanced)
            optimized = self.optimize_plan(base_plan, enhanced)
            final_plan = await self.add_flight_and_hotel_suggestions(optimized, enhanced)
        except MalformedModelOutputError:
            raise
        except Exception as e:
            logger.error(f"❌ 旅行计划生成失败: {e}")
            raise PlanGenerationError(f"旅行计划生成失败: {get_error_message(e)}") from e

        logger.info(
            f"✅ 旅行计划生成完成: {final_plan.title}, "
            f"{final_plan.total_days}天, 活动 {final_plan.activity_count} 个"
        )
        return final_plan

    async def adjust_travel_plan(self, plan: TravelPlan, instruction: str) -> TravelPlan:
        """按用户指令调整现有旅行计划，保留原计划的ID和创建时间"""
        logger.info(f"✏️ 开始调整旅行计划: {plan.id}, 指令: {instruction[:100]}")

        try:
            raw = await self.llm.complete(PromptTemplates.build_adjustment_prompt(plan, instruction))
            adjusted = format_travel_plan(raw, plan.total_days)
        except MalformedModelOutputError:
            raise
        except Exception as e:
            logger.error(f"❌ 旅行计划调整失败: {plan.id}, {e}")
            raise PlanAdjustmentError(f"旅行计划调整失败: {get_error_message(e)}") from e

        # 活动已被替换，每日费用以活动为准
        adjusted = adjusted.model_copy(update={
            "days": [BudgetCalculator.recompute_daily_summary(day) for day in adjusted.days],
        })
        if adjusted.estimated_budget.max == 0:
            adjusted = adjusted.model_copy(update={
                "estimated_budget": BudgetCalculator.estimate_budget(adjusted, DEFAULT_TRAVELERS),
            })

        adjusted = adjusted.model_copy(update={
            "id": plan.id,
            "note_id": plan.note_id,
            "created_at": plan.created_at,
            "updated_at": self._next_timestamp(plan.updated_at),
        })
        logger.info(f"✅ 旅行计划调整完成: {adjusted.id}")
        return adjusted

    async def generate_day_plan(
        self,
        day_number: int,
        theme: str,
        locations: List[str],
        activities: List[str],
        requirements: UserRequirements,
    ) -> TravelDay:
        """生成单日行程"""
        prompt = PromptTemplates.build_day_plan_prompt(day_number, theme, locations, activities, requirements)
        try:
            raw = await self.llm.complete(prompt)
            return self.validate_day_plan(parse_json_output(raw, DAY_PLAN_FORMAT_ERROR), raw)
        except MalformedModelOutputError:
            raise
        except Exception as e:
            logger.error(f"❌ 第{day_number}天计划生成失败: {e}")
            raise PlanGenerationError(f"第{day_number}天计划生成失败: {get_error_message(e)}") from e

    def optimize_route(
        self,
        activities: Sequence[TravelActivity],
        start_location: Optional[Tuple[float, float]] = None,
    ) -> List[TravelActivity]:
        return self.route_optimizer.optimize_route(activities, start_location)

    def estimate_budget(self, plan: TravelPlan, requirements: UserRequirements) -> EstimatedBudget:
        return BudgetCalculator.estimate_budget(plan, requirements.travelers)

    @staticmethod
    def enhance_requirements(requirements: UserRequirements, analysis: AnalysisResult) -> UserRequirements:
        """用分析结果补全空的旅行风格和兴趣，不修改传入对象"""
        update = {}
        if not requirements.travel_style:
            update["travel_style"] = list(analysis.travel_insights.travel_style[:2])
        if not requirements.interests:
            update["interests"] = list(analysis.themes[:3])
        return requirements.model_copy(update=update, deep=True)

    async def generate_base_plan(
        self,
        contents: Sequence[ExtractedContent],
        requirements: UserRequirements,
    ) -> TravelPlan:
        raw = await self.llm.complete(PromptTemplates.build_travel_plan_prompt(contents, requirements))
        return format_travel_plan(raw, requirements.duration)

    def optimize_plan(self, plan: TravelPlan, requirements: UserRequirements) -> TravelPlan:
        """优化每日活动顺序，重算每日费用和总预算"""
        days = [
            BudgetCalculator.recompute_daily_summary(
                day.model_copy(update={"activities": self.optimize_route(day.activities)})
            )
            for day in plan.days
        ]
        optimized = plan.model_copy(update={"days": days})
        return optimized.model_copy(update={
            "estimated_budget": self.estimate_budget(optimized, requirements),
        })

    async def add_flight_and_hotel_suggestions(self, plan: TravelPlan, requirements: UserRequirements) -> TravelPlan:
        """添加航班酒店建议，失败时仍返回计划"""
        enhanced = plan
        try:
            flights = await self.booking.generate_flight_suggestions(plan, requirements)
            enhanced = enhanced.model_copy(update={"flights": flights})
            hotels = await self.booking.generate_hotel_suggestions(plan, requirements)
            enhanced = enhanced.model_copy(update={"hotels": hotels})
        except Exception as e:
            logger.warning(f"⚠️ 添加航班酒店建议失败: {e}")
        return enhanced

    @staticmethod
    def validate_day_plan(data, raw: str) -> TravelDay:
        """宽松校验单日计划，缺失字段取默认值"""
        if not isinstance(data, dict):
            raise MalformedModelOutputError(DAY_PLAN_FORMAT_ERROR, raw_response=raw)
        day = {
            "dayNumber": data.get("dayNumber") or 1,
            "date": data.get("date") or date.today().isoformat(),
            "title": data.get("title") or "旅行日",
            "theme": data.get("theme") or "探索",
            "weather": data.get("weather"),
            "activities": data.get("activities") or [],
            "dailySummary": data.get("dailySummary"),
        }
        return validate_model_output(day, TravelDay, raw, DAY_PLAN_FORMAT_ERROR)

    @staticmethod
    def _next_timestamp(previous: Optional[datetime]) -> datetime:
        """保证新的 updated_at 严格晚于旧值"""
        now = datetime.now()
        if previous is not None and now <= previous:
            return previous + timedelta(microseconds=1)
        return now

"""
Gemini AI 服务
负责旅行计划生成、行程调整、指令解析和对话回复
"""

from datetime import datetime
from typing import Any, List, Optional, Sequence
from loguru import logger

from devinn.core.exceptions import (
    ChatResponseError,
    CommandParsingError,
    LLMRequestError,
    MalformedModelOutputError,
    PlanAdjustmentError,
    PlanGenerationError,
)
from devinn.schemas.content import ExtractedContent
from devinn.schemas.travel_plan import AICommand, ChatMessage, TravelPlan, UserRequirements
from devinn.services.ai.output_parser import parse_json_output, validate_model_output
from devinn.services.ai.prompt_templates import PromptTemplates
from devinn.tools.gemini_client import LLMClient
from devinn.tools.retry import retry
from devinn.tools.text_utils import get_error_message

PLAN_FORMAT_ERROR = "生成的旅行计划格式不正确"


def _is_malformed_output(error: Exception) -> bool:
    return isinstance(error, MalformedModelOutputError)


def format_travel_plan(raw: str, total_days: int) -> TravelPlan:
    """
    解析模型返回的旅行计划并标准化

    - 缺少 title / destination / days 视为格式错误
    - dayNumber 按顺序重排，活动 id 为 activity-{天序号}-{活动序号}，order 从 1 开始
    - 缺少预算时补零预算
    """
    data = parse_json_output(raw, PLAN_FORMAT_ERROR)
    if not isinstance(data, dict) or not data.get("title") or not data.get("destination") or not data.get("days"):
        raise MalformedModelOutputError(PLAN_FORMAT_ERROR, raw_response=raw)
    if not isinstance(data["days"], list):
        raise MalformedModelOutputError(PLAN_FORMAT_ERROR, raw_response=raw)

    days = []
    for day_index, day in enumerate(data["days"]):
        if not isinstance(day, dict):
            raise MalformedModelOutputError(PLAN_FORMAT_ERROR, raw_response=raw)
        raw_activities = [activity for activity in day.get("activities") or [] if isinstance(activity, dict)]
        activities = [
            {**activity, "id": f"activity-{day_index}-{act_index}", "order": act_index + 1}
            for act_index, activity in enumerate(raw_activities)
        ]
        days.append({**day, "dayNumber": day_index + 1, "activities": activities})

    now = datetime.now()
    plan_data = {
        "id": "",
        "title": data["title"],
        "destination": data["destination"],
        "totalDays": total_days,
        "estimatedBudget": data.get("estimatedBudget"),
        "days": days,
        "flights": data.get("flights") or [],
        "hotels": data.get("hotels") or [],
        "noteId": "",
        "createdAt": now,
        "updatedAt": now,
    }
    return validate_model_output(plan_data, TravelPlan, raw, PLAN_FORMAT_ERROR)


class GeminiService(LLMClient):
    """Gemini AI 服务，本身也是带重试的 LLMClient"""

    def __init__(self, llm: LLMClient, retry_attempts: int = 3, retry_delay: float = 2.0):
        self.llm = llm
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay

    async def complete(self, prompt: str) -> str:
        """调用模型，传输失败按固定次数重试，最终失败抛出 LLMRequestError"""
        try:
            return await retry(
                lambda: self.llm.complete(prompt),
                max_attempts=self.retry_attempts,
                delay=self.retry_delay,
                giveup=_is_malformed_output,
            )
        except MalformedModelOutputError:
            raise
        except Exception as e:
            raise LLMRequestError(f"AI服务调用失败: {get_error_message(e)}") from e

    async def generate_travel_plan(
        self,
        contents: Sequence[ExtractedContent],
        requirements: UserRequirements,
    ) -> TravelPlan:
        """根据提取内容和用户需求生成旅行计划"""
        prompt = PromptTemplates.build_travel_plan_prompt(contents, requirements)
        try:
            raw = await self.complete(prompt)
            plan = format_travel_plan(raw, requirements.duration)
            logger.info(f"✅ 旅行计划生成完成: {plan.title}")
            return plan
        except MalformedModelOutputError:
            raise
        except Exception as e:
            raise PlanGenerationError(f"旅行计划生成失败: {get_error_message(e)}") from e

    async def adjust_travel_plan(self, plan: TravelPlan, instruction: str) -> TravelPlan:
        """按用户指令调整行程"""
        prompt = PromptTemplates.build_adjustment_prompt(plan, instruction)
        try:
            raw = await self.complete(prompt)
            return format_travel_plan(raw, plan.total_days)
        except MalformedModelOutputError:
            raise
        except Exception as e:
            raise PlanAdjustmentError(f"行程调整失败: {get_error_message(e)}") from e

    async def parse_command(self, command: str, plan: TravelPlan) -> AICommand:
        """解析自然语言指令，生成执行计划"""
        prompt = PromptTemplates.build_command_parsing_prompt(command, plan)
        try:
            raw = await self.complete(prompt)
            data: Any = parse_json_output(raw, "指令解析结果格式错误")
            if isinstance(data, dict) and not data.get("userInput"):
                data["userInput"] = command
            return validate_model_output(data, AICommand, raw, "指令解析结果格式错误")
        except MalformedModelOutputError:
            raise
        except Exception as e:
            raise CommandParsingError(f"指令解析失败: {get_error_message(e)}") from e

    async def generate_chat_response(
        self,
        message: str,
        chat_history: List[ChatMessage],
        plan: Optional[TravelPlan] = None,
    ) -> str:
        """生成助手回复"""
        prompt = PromptTemplates.build_chat_prompt(message, chat_history, plan)
        try:
            reply = await self.complete(prompt)
            return reply.strip()
        except Exception as e:
            raise ChatResponseError(f"AI回复生成失败: {get_error_message(e)}") from e

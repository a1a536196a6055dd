"""
AI分析与行程规划API端点
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import Field

from devinn.core.container import ServiceContainer, get_container
from devinn.core.exceptions import DevInnError, InvalidInputError
from devinn.schemas.base import CamelModel
from devinn.schemas.content import ExtractedContent
from devinn.schemas.recommendation import UserPreferences
from devinn.schemas.travel_plan import ChatMessage, TravelPlan, UserRequirements

router = APIRouter()

MAX_CONTENT_ITEMS = 10


class AnalyzeRequest(CamelModel):
    content: List[ExtractedContent] = Field(..., min_length=1, max_length=MAX_CONTENT_ITEMS)
    options: Optional[Dict[str, Any]] = None


class GeneratePlanRequest(CamelModel):
    extracted_content: List[ExtractedContent] = Field(..., min_length=1, max_length=MAX_CONTENT_ITEMS)
    user_requirements: UserRequirements
    options: Optional[Dict[str, Any]] = None


class AdjustPlanRequest(CamelModel):
    travel_plan: TravelPlan
    instruction: str = Field(..., min_length=1, max_length=500)


class ParseCommandRequest(CamelModel):
    command: str = Field(..., min_length=1, max_length=500)
    travel_plan: TravelPlan


class ChatRequest(CamelModel):
    """聊天请求模型"""
    message: str = Field(..., min_length=1, max_length=1000)
    chat_history: List[ChatMessage] = Field(default_factory=list)
    travel_plan: Optional[TravelPlan] = None


class RecommendRequest(CamelModel):
    extracted_content: List[ExtractedContent] = Field(..., min_length=1, max_length=MAX_CONTENT_ITEMS)
    user_requirements: UserRequirements
    user_preferences: Optional[UserPreferences] = None
    options: Optional[Dict[str, Any]] = None


def _http_error(e: Exception, message: str) -> HTTPException:
    """输入错误映射为400，其余为500"""
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=f"{message}: {str(e)}")


def _plan_complexity(days: int) -> str:
    if days > 7:
        return "complex"
    if days > 3:
        return "moderate"
    return "simple"


@router.post("/analyze")
async def analyze_content(
    request: AnalyzeRequest,
    container: ServiceContainer = Depends(get_container),
):
    """逐条分析内容，单条失败不影响其它内容"""
    logger.info(f"🔍 API访问: 内容分析 {len(request.content)} 条")
    results = []
    for item in request.content:
        entry: Dict[str, Any] = {"contentId": item.title, "title": item.title, "platform": item.platform.value}
        try:
            analysis = await container.analyzer.analyze_contents([item])
            entry["analysis"] = analysis.model_dump(mode="json")
        except DevInnError as e:
            logger.error(f"❌ 内容分析失败: {item.title}, {e}")
            entry["analysis"] = None
            entry["error"] = str(e)
        results.append(entry)

    successful = [r["analysis"] for r in results if r["analysis"] is not None]
    average_quality = (
        sum(a["quality_score"] for a in successful) / len(successful) if successful else 0
    )
    return {
        "success": True,
        "results": results,
        "summary": {
            "totalContent": len(request.content),
            "successfulAnalyses": len(successful),
            "failedAnalyses": len(results) - len(successful),
            "totalLocations": sum(len(a["locations"]) for a in successful),
            "totalActivities": sum(len(a["activities"]) for a in successful),
            "averageQualityScore": round(average_quality, 2),
        },
        "timestamp": datetime.now().isoformat(),
    }


@router.post("/analyze-quality")
async def analyze_content_quality(
    content: ExtractedContent,
    container: ServiceContainer = Depends(get_container),
):
    """单条内容质量评估，失败时返回中性分数"""
    report = await container.analyzer.analyze_content_quality(content)
    return {"success": True, "data": report.model_dump()}


@router.post("/generate-plan")
async def generate_plan(
    request: GeneratePlanRequest,
    container: ServiceContainer = Depends(get_container),
):
    """根据提取内容和用户需求生成旅行计划"""
    requirements = request.user_requirements
    logger.info(
        f"🗺️ API访问: 生成旅行计划 内容 {len(request.extracted_content)} 条, "
        f"{requirements.duration}天, {requirements.travelers}人"
    )
    try:
        plan = await container.planner.generate_travel_plan(request.extracted_content, requirements)
    except Exception as e:
        logger.error(f"生成旅行计划失败: {e}")
        raise _http_error(e, "生成旅行计划失败")

    days = len(plan.days)
    return {
        "success": True,
        "data": {
            "travelPlan": plan.to_json_dict(),
            "metadata": {
                "generatedAt": datetime.now().isoformat(),
                "contentSources": len(request.extracted_content),
                "planComplexity": _plan_complexity(days),
                "estimatedPlanningTime": f"{math.ceil(days * 2)} hours",
            },
        },
        "timestamp": datetime.now().isoformat(),
    }


@router.post("/adjust-plan")
async def adjust_plan(
    request: AdjustPlanRequest,
    container: ServiceContainer = Depends(get_container),
):
    """按自然语言指令调整行程"""
    try:
        plan = await container.planner.adjust_travel_plan(request.travel_plan, request.instruction)
    except Exception as e:
        logger.error(f"调整旅行计划失败: {e}")
        raise _http_error(e, "调整旅行计划失败")
    return {"success": True, "data": {"travelPlan": plan.to_json_dict()}}


@router.post("/parse-command")
async def parse_command(
    request: ParseCommandRequest,
    container: ServiceContainer = Depends(get_container),
):
    """解析自然语言指令"""
    try:
        command = await container.gemini.parse_command(request.command, request.travel_plan)
    except Exception as e:
        logger.error(f"解析指令失败: {e}")
        raise _http_error(e, "解析指令失败")
    return {"success": True, "data": command.to_json_dict()}


@router.post("/chat")
async def chat(
    request: ChatRequest,
    container: ServiceContainer = Depends(get_container),
):
    """AI助手对话"""
    try:
        reply = await container.gemini.generate_chat_response(
            request.message, request.chat_history, request.travel_plan
        )
    except Exception as e:
        logger.error(f"AI对话失败: {e}")
        raise _http_error(e, "AI对话失败")
    return {
        "success": True,
        "data": {"reply": reply},
        "timestamp": datetime.now().isoformat(),
    }


@router.post("/recommend")
async def recommend(
    request: RecommendRequest,
    container: ServiceContainer = Depends(get_container),
):
    """个性化推荐"""
    logger.info(f"🎯 API访问: 个性化推荐 内容 {len(request.extracted_content)} 条")
    try:
        analyses = []
        for content in request.extracted_content:
            analyses.append(await container.analyzer.analyze_contents([content]))
        result = await container.recommender.generate_recommendations(
            request.extracted_content,
            request.user_requirements,
            analyses,
            request.user_preferences,
        )
    except Exception as e:
        logger.error(f"生成推荐失败: {e}")
        raise _http_error(e, "生成推荐失败")

    scores = [r.score for r in result.recommendations]
    return {
        "success": True,
        "data": {
            "recommendations": [r.model_dump(mode="json") for r in result.recommendations],
            "alternatives": [a.model_dump(mode="json") for a in result.alternatives],
            "metadata": {
                "confidenceScore": result.confidence_score,
                "reasoning": result.reasoning,
                "generatedAt": datetime.now().isoformat(),
                "contentAnalyzed": len(request.extracted_content),
                "userPreferencesApplied": request.user_preferences is not None,
            },
        },
        "summary": {
            "totalRecommendations": len(scores),
            "highConfidenceCount": sum(1 for s in scores if s > 0.8),
            "mediumConfidenceCount": sum(1 for s in scores if 0.6 < s <= 0.8),
            "lowConfidenceCount": sum(1 for s in scores if s <= 0.6),
            "averageConfidence": round(sum(scores) / len(scores), 2) if scores else 0,
            "categoriesRepresented": sorted({r.type for r in result.recommendations}),
        },
        "timestamp": datetime.now().isoformat(),
    }

"""
个性化推荐引擎

按用户偏好对提取内容打分：
- 活动类型匹配 30%
- 兴趣匹配 25%
- 旅行风格匹配 20%
- 内容质量 15%
- 地理位置相关性 10%
"""

import random
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
from loguru import logger

from devinn.core.exceptions import RecommendationError
from devinn.schemas.analysis import ActivityInsight, AnalysisResult, LocationInsight
from devinn.schemas.content import ExtractedContent
from devinn.schemas.recommendation import (
    Alternative,
    Recommendation,
    RecommendationCost,
    RecommendationLocation,
    RecommendationMetadata,
    RecommendationResult,
    RecommendationTiming,
    UserPreferences,
)
from devinn.schemas.travel_plan import UserRequirements
from devinn.services.ai.output_parser import parse_json_output
from devinn.services.ai.prompt_templates import PromptTemplates
from devinn.tools.gemini_client import LLMClient
from devinn.tools.text_utils import get_error_message

MAX_RECOMMENDATIONS = 10
MAX_ALTERNATIVES = 3
# 地点数达到该值时地理相关性满分
FULL_LOCATION_COUNT = 5
# 推荐数达到该值时数量因子满分
FULL_RECOMMENDATION_COUNT = 5

STYLE_KEYWORDS = {
    "relaxed": (("休闲", "放松", "度假", "慢节奏"), "适合休闲旅行"),
    "adventure": (("冒险", "探险", "户外", "刺激"), "适合冒险旅行"),
    "cultural": (("文化", "历史", "艺术", "传统"), "适合文化旅行"),
    "luxury": (("奢华", "高端", "精品", "豪华"), "适合奢华旅行"),
}
STYLE_MATCH_SCORE = 0.8

DEFAULT_DESCRIPTION = "这是一个精彩的旅行推荐，值得体验。"
DEFAULT_REASONING = "基于您的需求和偏好，我们为您精选了这些推荐，希望能为您的旅行增添精彩体验。"
ALTERNATIVE_REASONS = [
    "如果您想要不同的体验",
    "作为备选方案考虑",
    "适合时间充裕的情况",
    "预算允许的话可以考虑",
    "如果主要推荐不合适",
]


@dataclass
class SimilarityScore:
    """单条内容与用户偏好的匹配结果"""
    index: int
    score: float
    matching_factors: List[str] = field(default_factory=list)


def calculate_activity_match(activities: Sequence[ActivityInsight], preferred_types: Sequence[str]) -> Tuple[float, List[str]]:
    if not activities or not preferred_types:
        return 0.0, []
    factors = []
    for activity in activities:
        for preferred in preferred_types:
            needle = preferred.lower()
            if needle in activity.category.lower() or needle in activity.name.lower():
                factors.append(f"匹配活动: {activity.name}")
                break
    return len(factors) / max(len(activities), len(preferred_types)), factors


def calculate_interest_match(themes: Sequence[str], interests: Sequence[str]) -> Tuple[float, List[str]]:
    if not themes or not interests:
        return 0.0, []
    factors = []
    for theme in themes:
        for interest in interests:
            if interest.lower() in theme.lower() or theme.lower() in interest.lower():
                factors.append(f"匹配兴趣: {theme}")
                break
    return len(factors) / max(len(themes), len(interests)), factors


def calculate_style_match(analysis: AnalysisResult, travel_style: str) -> Tuple[float, List[str]]:
    if travel_style not in STYLE_KEYWORDS:
        return 0.5, []
    keywords, factor = STYLE_KEYWORDS[travel_style]
    if any(keyword in theme for theme in analysis.themes for keyword in keywords):
        return STYLE_MATCH_SCORE, [factor]
    return 0.0, []


def calculate_location_relevance(locations: Sequence[LocationInsight]) -> Tuple[float, List[str]]:
    if not locations:
        return 0.0, []
    return min(len(locations) / FULL_LOCATION_COUNT, 1.0), [f"包含{len(locations)}个地理位置"]


def estimate_duration(analysis: AnalysisResult) -> str:
    count = len(analysis.activities)
    if count == 0:
        return "1-2小时"
    if count <= 2:
        return "1-3小时"
    if count <= 4:
        return "半天"
    return "全天"


def estimate_price(analysis: AnalysisResult) -> int:
    """基础价 100，按内容质量和活动数量缩放"""
    quality_multiplier = analysis.quality_score / 100
    activity_multiplier = min(len(analysis.activities) * 0.5, 2)
    return round(100 * quality_multiplier * activity_multiplier)


def get_price_range(price: float) -> str:
    if price < 100:
        return "经济实惠"
    if price < 300:
        return "中等价位"
    return "高端消费"


def determine_recommendation_type(analysis: AnalysisResult) -> str:
    if analysis.locations:
        location = analysis.locations[0]
        if any(keyword in location.name for keyword in ("餐厅", "美食")):
            return "restaurant"
        if any(keyword in location.name for keyword in ("酒店", "住宿")):
            return "hotel"
        if location.type == "ATTRACTION" or any(keyword in location.name for keyword in ("景点", "景区")):
            return "location"
    if analysis.activities:
        return "activity"
    return "location"


class RecommendationEngine:
    """个性化推荐引擎"""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def generate_recommendations(
        self,
        contents: Sequence[ExtractedContent],
        requirements: UserRequirements,
        analyses: Sequence[AnalysisResult],
        preferences: Optional[UserPreferences] = None,
    ) -> RecommendationResult:
        """生成个性化推荐，analyses 与 contents 按下标一一对应"""
        logger.info(f"🎯 开始生成个性化推荐: 内容 {len(contents)} 条, {requirements.duration}天")
        try:
            resolved = await self.analyze_user_preferences(requirements, preferences)
            similarities = self.calculate_content_similarity(contents, analyses, resolved)
            recommendations = await self.generate_recommendation_list(similarities, contents, analyses)
            confidence = self.calculate_confidence_score(recommendations, similarities)
            reasoning = await self.generate_recommendation_reasoning(recommendations, resolved, requirements)
            alternatives = self.generate_alternatives(recommendations, contents)
        except Exception as e:
            logger.error(f"❌ 推荐生成失败: {e}")
            raise RecommendationError(f"推荐生成失败: {get_error_message(e)}") from e

        logger.info(
            f"✅ 推荐生成完成: 推荐 {len(recommendations)} 个, "
            f"置信度 {confidence}, 备选 {len(alternatives)} 个"
        )
        return RecommendationResult(
            recommendations=recommendations,
            confidence_score=confidence,
            reasoning=reasoning,
            alternatives=alternatives,
        )

    async def analyze_user_preferences(
        self,
        requirements: UserRequirements,
        explicit: Optional[UserPreferences] = None,
    ) -> UserPreferences:
        """有明确偏好时直接使用，否则让模型从需求推断，失败时使用默认偏好"""
        if explicit is not None:
            return explicit
        try:
            raw = await self.llm.complete(PromptTemplates.build_preference_prompt(requirements))
            data = parse_json_output(raw, "用户偏好格式错误")
            preferences = UserPreferences.model_validate(data)
            logger.info(f"用户偏好分析完成: {preferences.travel_style}, {preferences.budget_range}")
            return preferences
        except Exception as e:
            logger.warning(f"⚠️ 用户偏好分析失败，使用默认偏好: {e}")
            return UserPreferences()

    def calculate_content_similarity(
        self,
        contents: Sequence[ExtractedContent],
        analyses: Sequence[AnalysisResult],
        preferences: UserPreferences,
    ) -> List[SimilarityScore]:
        """按分数降序；没有对应分析结果的内容跳过"""
        scores = []
        for index, _content in enumerate(contents):
            if index >= len(analyses) or analyses[index] is None:
                continue
            score, factors = self.calculate_single_similarity(analyses[index], preferences)
            scores.append(SimilarityScore(index=index, score=score, matching_factors=factors))
        return sorted(scores, key=lambda s: s.score, reverse=True)

    @staticmethod
    def calculate_single_similarity(analysis: AnalysisResult, preferences: UserPreferences) -> Tuple[float, List[str]]:
        factors: List[str] = []

        activity_score, activity_factors = calculate_activity_match(analysis.activities, preferences.activity_types)
        interest_score, interest_factors = calculate_interest_match(analysis.themes, preferences.interests)
        style_score, style_factors = calculate_style_match(analysis, preferences.travel_style)
        location_score, location_factors = calculate_location_relevance(analysis.locations)

        score = (
            activity_score * 0.3
            + interest_score * 0.25
            + style_score * 0.2
            + analysis.quality_score / 100 * 0.15
            + location_score * 0.1
        )
        factors.extend(activity_factors)
        factors.extend(interest_factors)
        factors.extend(style_factors)
        if analysis.quality_score > 80:
            factors.append("高质量内容")
        factors.extend(location_factors)

        return min(score, 1.0), factors

    async def generate_recommendation_list(
        self,
        similarities: Sequence[SimilarityScore],
        contents: Sequence[ExtractedContent],
        analyses: Sequence[AnalysisResult],
    ) -> List[Recommendation]:
        """取匹配度最高的 10 条内容生成推荐，单条失败跳过"""
        recommendations = []
        for similarity in similarities[:MAX_RECOMMENDATIONS]:
            content = contents[similarity.index]
            try:
                recommendations.append(
                    await self.create_recommendation(content, analyses[similarity.index], similarity)
                )
            except Exception as e:
                logger.error(f"❌ 创建推荐项失败: {content.title}, {e}")
        return recommendations

    async def create_recommendation(
        self,
        content: ExtractedContent,
        analysis: AnalysisResult,
        similarity: SimilarityScore,
    ) -> Recommendation:
        price = estimate_price(analysis)
        location = None
        if analysis.locations:
            first = analysis.locations[0]
            location = RecommendationLocation(name=first.name, coordinates=first.coordinates or (0.0, 0.0), address="地址信息")

        return Recommendation(
            id=f"rec_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
            type=determine_recommendation_type(analysis),
            title=content.title or "精彩推荐",
            description=await self.generate_recommendation_description(content, analysis),
            score=max(0.0, similarity.score),
            reasons=list(similarity.matching_factors),
            metadata=RecommendationMetadata(
                location=location,
                timing=RecommendationTiming(best_time="全天", duration=estimate_duration(analysis), season="四季皆宜"),
                cost=RecommendationCost(estimated_price=price, price_range=get_price_range(price), currency="CNY"),
                tags=list(analysis.themes),
                popularity_score=analysis.quality_score,
            ),
        )

    async def generate_recommendation_description(self, content: ExtractedContent, analysis: AnalysisResult) -> str:
        try:
            reply = await self.llm.complete(
                PromptTemplates.build_recommendation_description_prompt(content, analysis.themes)
            )
            return reply.strip() or content.description or DEFAULT_DESCRIPTION
        except Exception as e:
            logger.warning(f"⚠️ 生成推荐描述失败: {e}")
            return content.description or DEFAULT_DESCRIPTION

    @staticmethod
    def calculate_confidence_score(
        recommendations: Sequence[Recommendation],
        similarities: Sequence[SimilarityScore],
    ) -> int:
        """round((平均匹配度 * 0.7 + 数量因子 * 0.3) * 100)"""
        if not recommendations:
            return 0
        count = len(recommendations)
        avg_similarity = sum(s.score for s in similarities[:count]) / count
        count_factor = min(count / FULL_RECOMMENDATION_COUNT, 1)
        return max(0, min(100, round((avg_similarity * 0.7 + count_factor * 0.3) * 100)))

    async def generate_recommendation_reasoning(
        self,
        recommendations: Sequence[Recommendation],
        preferences: UserPreferences,
        requirements: UserRequirements,
    ) -> str:
        try:
            reply = await self.llm.complete(PromptTemplates.build_recommendation_reasoning_prompt(
                preferences.model_dump(), requirements, [r.title for r in recommendations]
            ))
            return reply.strip() or DEFAULT_REASONING
        except Exception as e:
            logger.warning(f"⚠️ 生成推荐理由失败: {e}")
            return DEFAULT_REASONING

    @staticmethod
    def generate_alternatives(
        recommendations: Sequence[Recommendation],
        contents: Sequence[ExtractedContent],
    ) -> List[Alternative]:
        """从未进入推荐列表的内容里取最多 3 个备选"""
        recommended_titles = {r.title for r in recommendations}
        return [
            Alternative(
                title=content.title or "替代选择",
                description=content.description or "另一个不错的选择",
                score=0.6,
                why_alternative=random.choice(ALTERNATIVE_REASONS),
            )
            for content in contents
            if content.title not in recommended_titles
        ][:MAX_ALTERNATIVES]

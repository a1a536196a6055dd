"""
内容分析器
调用 AI 对提取的旅行内容做整体分析，并提供不依赖 AI 的本地地点/活动统计
"""

from typing import Dict, List, Sequence
from loguru import logger

from devinn.core.exceptions import ContentAnalysisError, EmptyContentError, MalformedModelOutputError
from devinn.schemas.analysis import ActivityInsight, AnalysisResult, ContentQualityReport, LocationInsight
from devinn.schemas.content import ActivityType, ExtractedContent
from devinn.services.ai.output_parser import decode_model_output
from devinn.services.ai.prompt_templates import PromptTemplates
from devinn.tools.gemini_client import LLMClient
from devinn.tools.text_utils import get_error_message

MAX_RELATED_ACTIVITIES = 5

VISIT_DURATIONS = {
    ActivityType.ATTRACTION: 180,
    ActivityType.RESTAURANT: 90,
    ActivityType.HOTEL: 60,
    ActivityType.TRANSPORT: 30,
}
DEFAULT_VISIT_DURATION = 120

# 按顺序匹配，先命中者生效
LOCATION_TYPE_KEYWORDS = [
    ("CITY", ("市", "城", "区")),
    ("ATTRACTION", ("景区", "公园", "寺", "宫")),
    ("DISTRICT", ("街", "路", "广场")),
]

ACTIVITY_CATEGORY_KEYWORDS = [
    ("DINING", ("美食", "餐", "吃")),
    ("SHOPPING", ("购物", "买")),
    ("CULTURE", ("文化", "历史", "博物馆")),
    ("NATURE", ("自然", "山", "海")),
    ("ENTERTAINMENT", ("娱乐", "夜生活")),
    ("ADVENTURE", ("冒险", "极限")),
]

DIFFICULTY_KEYWORDS = [
    ("HARD", ("困难", "挑战", "极限")),
    ("MODERATE", ("适中", "一般", "需要")),
]


def _match_keywords(text: str, table, default: str) -> str:
    text = (text or "").lower()
    for label, keywords in table:
        if any(keyword in text for keyword in keywords):
            return label
    return default


def classify_location_type(name: str) -> str:
    return _match_keywords(name, LOCATION_TYPE_KEYWORDS, "LANDMARK")


def classify_activity_category(category: str) -> str:
    return _match_keywords(category, ACTIVITY_CATEGORY_KEYWORDS, "SIGHTSEEING")


def assess_difficulty(description: str) -> str:
    return _match_keywords(description, DIFFICULTY_KEYWORDS, "EASY")


def estimate_visit_duration(location_type: ActivityType) -> int:
    return VISIT_DURATIONS.get(location_type, DEFAULT_VISIT_DURATION)


class ContentAnalyzer:
    """内容分析器"""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def analyze_contents(self, contents: Sequence[ExtractedContent]) -> AnalysisResult:
        """
        批量分析内容

        空列表在调用模型之前就失败；模型输出格式错误直接抛出 MalformedModelOutputError，
        其它失败包装为 ContentAnalysisError。
        """
        if not contents:
            raise EmptyContentError("没有内容可供分析")

        logger.info(f"🔍 开始分析 {len(contents)} 条内容")
        try:
            raw = await self.llm.complete(PromptTemplates.build_content_analysis_prompt(contents))
            result = decode_model_output(raw, AnalysisResult, "AI分析结果格式错误")
            logger.info(
                f"✅ 内容分析完成: 地点 {len(result.locations)} 个, "
                f"活动 {len(result.activities)} 个, 质量分 {result.quality_score:.0f}"
            )
            return result
        except MalformedModelOutputError:
            raise
        except Exception as e:
            logger.error(f"❌ 内容分析失败: {e}")
            raise ContentAnalysisError(f"内容分析失败: {get_error_message(e)}") from e

    async def analyze_content_quality(self, content: ExtractedContent) -> ContentQualityReport:
        """单条内容质量评估，任何失败都返回中性结果"""
        try:
            raw = await self.llm.complete(PromptTemplates.build_quality_assessment_prompt(content))
            return decode_model_output(raw, ContentQualityReport, "质量评估结果格式错误")
        except Exception as e:
            logger.error(f"❌ 内容质量分析失败: {content.title}, {e}")
            return ContentQualityReport.neutral()

    def extract_location_insights(self, contents: Sequence[ExtractedContent]) -> List[LocationInsight]:
        """按名称（忽略大小写）合并所有地点，按热度降序"""
        insights: Dict[str, LocationInsight] = {}
        for content in contents:
            for location in content.locations:
                key = location.name.lower()
                if key in insights:
                    insights[key].mentioned_count += 1
                    continue
                insights[key] = LocationInsight(
                    name=location.name,
                    type=classify_location_type(location.name),
                    coordinates=location.coordinates,
                    popularity_score=self.calculate_location_popularity(location.name, contents),
                    mentioned_count=1,
                    related_activities=self.find_related_activities(location.name, contents),
                    estimated_duration=estimate_visit_duration(location.type),
                )
        return sorted(insights.values(), key=lambda item: item.popularity_score, reverse=True)

    def extract_activity_insights(self, contents: Sequence[ExtractedContent]) -> List[ActivityInsight]:
        """按名称（忽略大小写）合并所有活动，费用取有效值的平均，按热度降序"""
        insights: Dict[str, ActivityInsight] = {}
        cost_totals: Dict[str, List[float]] = {}

        for content in contents:
            for activity in content.activities:
                key = activity.name.lower()
                if activity.estimated_cost:
                    cost_totals.setdefault(key, []).append(activity.estimated_cost)

                if key in insights:
                    insight = insights[key]
                    insight.mentioned_count += 1
                    costs = cost_totals.get(key)
                    if costs:
                        insight.estimated_cost = sum(costs) / len(costs)
                    continue

                insights[key] = ActivityInsight(
                    name=activity.name,
                    category=classify_activity_category(activity.category),
                    popularity_score=self.calculate_activity_popularity(activity.name, contents),
                    mentioned_count=1,
                    estimated_cost=activity.estimated_cost,
                    duration=activity.duration,
                    difficulty_level=assess_difficulty(activity.description),
                    tips=list(activity.tips),
                )
        return sorted(insights.values(), key=lambda item: item.popularity_score, reverse=True)

    @staticmethod
    def calculate_location_popularity(name: str, contents: Sequence[ExtractedContent]) -> float:
        needle = name.lower()
        score = 0.0
        mentions = 0
        for content in contents:
            if any(needle in loc.name.lower() for loc in content.locations):
                mentions += 1
                stats = content.stats
                score += stats.likes * 0.3 + stats.comments * 0.5 + stats.shares * 0.2
        return min(100.0, (score / max(1, mentions)) / 100 + mentions * 10)

    @staticmethod
    def calculate_activity_popularity(name: str, contents: Sequence[ExtractedContent]) -> float:
        needle = name.lower()
        score = 0.0
        mentions = 0
        for content in contents:
            if any(needle in act.name.lower() for act in content.activities):
                mentions += 1
                stats = content.stats
                score += stats.likes * 0.4 + stats.comments * 0.4 + stats.shares * 0.2
        return min(100.0, (score / max(1, mentions)) / 50 + mentions * 15)

    @staticmethod
    def find_related_activities(location_name: str, contents: Sequence[ExtractedContent]) -> List[str]:
        """出现过该地点的内容里的活动，最多 5 个"""
        needle = location_name.lower()
        related: List[str] = []
        for content in contents:
            if not any(needle in loc.name.lower() for loc in content.locations):
                continue
            for activity in content.activities:
                if activity.name not in related:
                    related.append(activity.name)
        return related[:MAX_RELATED_ACTIVITIES]

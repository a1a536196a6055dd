"""个性化推荐引擎单元测试"""

import pytest

from devinn.core.exceptions import RecommendationError
from devinn.schemas.analysis import ActivityInsight, AnalysisResult, LocationInsight
from devinn.schemas.content import ExtractedContent, Platform
from devinn.schemas.recommendation import Recommendation, UserPreferences
from devinn.schemas.travel_plan import UserRequirements
from devinn.services.ai.recommendation_engine import (
    DEFAULT_REASONING,
    RecommendationEngine,
    SimilarityScore,
    determine_recommendation_type,
    estimate_duration,
    estimate_price,
    get_price_range,
)

REQUIREMENTS = UserRequirements(duration=3, travelers=2)
CULTURAL = UserPreferences(travel_style="cultural", activity_types=["dining"], interests=["美食"])


def make_analysis(quality=90, themes=("美食", "文化"), activities=("寿司",), locations=("筑地市场",)):
    return AnalysisResult(
        quality_score=quality,
        themes=list(themes),
        activities=[ActivityInsight(name=name, category="DINING") for name in activities],
        locations=[LocationInsight(name=name, type="ATTRACTION") for name in locations],
    )


def make_content(title, description=""):
    return ExtractedContent(title=title, description=description, platform=Platform.XIAOHONGSHU)


class TestSimilarity:
    """匹配度计算测试"""

    def test_single_similarity(self):
        score, factors = RecommendationEngine.calculate_single_similarity(make_analysis(), CULTURAL)

        # 0.3 + 0.5*0.25 + 0.8*0.2 + 0.9*0.15 + 0.2*0.1
        assert score == pytest.approx(0.74)
        assert factors == ["匹配活动: 寿司", "匹配兴趣: 美食", "适合文化旅行", "高质量内容", "包含1个地理位置"]

    def test_unknown_style_is_neutral(self):
        prefs = UserPreferences.model_construct(**{**CULTURAL.model_dump(), "travel_style": "slow"})
        score, _ = RecommendationEngine.calculate_single_similarity(
            make_analysis(themes=(), activities=(), locations=(), quality=0), prefs
        )
        assert score == pytest.approx(0.1)

    def test_sorted_and_skips_missing_analysis(self, make_llm):
        engine = RecommendationEngine(make_llm())
        contents = [make_content("低分"), make_content("高分"), make_content("无分析")]
        analyses = [make_analysis(quality=10, themes=(), activities=()), make_analysis()]

        similarities = engine.calculate_content_similarity(contents, analyses, CULTURAL)

        assert [s.index for s in similarities] == [1, 0]


class TestConfidence:
    def test_formula(self):
        recommendations = [Recommendation(id="1", title="a"), Recommendation(id="2", title="b")]
        similarities = [SimilarityScore(index=0, score=0.74), SimilarityScore(index=1, score=0.5)]
        # (0.62 * 0.7 + 0.4 * 0.3) * 100
        assert RecommendationEngine.calculate_confidence_score(recommendations, similarities) == 55

    def test_empty(self):
        assert RecommendationEngine.calculate_confidence_score([], []) == 0


class TestHelpers:
    def test_recommendation_type(self):
        assert determine_recommendation_type(make_analysis(locations=("海底捞餐厅",))) == "restaurant"
        assert determine_recommendation_type(make_analysis(locations=("希尔顿酒店",))) == "hotel"
        assert determine_recommendation_type(make_analysis()) == "location"
        assert determine_recommendation_type(make_analysis(locations=())) == "activity"
        assert determine_recommendation_type(make_analysis(locations=(), activities=())) == "location"

    def test_price(self):
        analysis = make_analysis(quality=80, activities=("a", "b", "c"))
        assert estimate_price(analysis) == 120
        assert get_price_range(120) == "中等价位"
        assert get_price_range(50) == "经济实惠"
        assert get_price_range(300) == "高端消费"

    def test_duration(self):
        assert estimate_duration(make_analysis(activities=())) == "1-2小时"
        assert estimate_duration(make_analysis(activities=("a", "b", "c"))) == "半天"
        assert estimate_duration(make_analysis(activities=tuple("abcde"))) == "全天"


class TestGenerateRecommendations:
    """推荐生成流程测试"""

    @pytest.mark.asyncio
    async def test_explicit_preferences_skip_llm(self, make_llm):
        llm = make_llm(["描述", "描述", "推荐理由"])
        engine = RecommendationEngine(llm)
        contents = [make_content("寿司之旅"), make_content("文化之旅"), make_content("备选内容", "另一条")]
        analyses = [make_analysis(), make_analysis(quality=60)]

        result = await engine.generate_recommendations(contents, REQUIREMENTS, analyses, CULTURAL)

        assert llm.call_count == 3
        assert [r.title for r in result.recommendations] == ["寿司之旅", "文化之旅"]
        assert result.recommendations[0].description == "描述"
        assert result.recommendations[0].id.startswith("rec_")
        assert result.reasoning == "推荐理由"
        assert [a.title for a in result.alternatives] == ["备选内容"]
        assert result.alternatives[0].score == 0.6
        assert 0 <= result.confidence_score <= 100

    @pytest.mark.asyncio
    async def test_fallbacks(self, make_llm):
        llm = make_llm(["不是JSON", RuntimeError("503"), "  "])
        engine = RecommendationEngine(llm)
        contents = [make_content("寿司之旅", "原始描述")]

        result = await engine.generate_recommendations(contents, REQUIREMENTS, [make_analysis()])

        assert result.recommendations[0].description == "原始描述"
        assert result.reasoning == DEFAULT_REASONING
        assert result.alternatives == []

    @pytest.mark.asyncio
    async def test_default_preferences(self, make_llm):
        engine = RecommendationEngine(make_llm([RuntimeError("503")]))
        assert await engine.analyze_user_preferences(REQUIREMENTS) == UserPreferences()

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, make_llm):
        engine = RecommendationEngine(make_llm(["描述", "理由"]))
        with pytest.raises(RecommendationError):
            await engine.generate_recommendations([make_content("a")], REQUIREMENTS, ["坏数据"], CULTURAL)

"""内容分析器单元测试"""

import pytest

from devinn.core.exceptions import ContentAnalysisError, EmptyContentError, MalformedModelOutputError
from devinn.schemas.content import (
    ContentStats,
    ExtractedActivity,
    ExtractedContent,
    ExtractedLocation,
    Platform,
)
from devinn.services.ai.content_analyzer import (
    ContentAnalyzer,
    assess_difficulty,
    classify_activity_category,
    classify_location_type,
)


def make_content(title, locations=(), activities=(), likes=0, comments=0, shares=0):
    return ExtractedContent(
        title=title,
        platform=Platform.XIAOHONGSHU,
        locations=[ExtractedLocation(name=name) for name in locations],
        activities=activities,
        stats=ContentStats(likes=likes, comments=comments, shares=shares),
    )


class TestAnalyzeContents:
    """AI 批量分析测试"""

    @pytest.mark.asyncio
    async def test_empty_input_fails_before_llm(self, make_llm):
        llm = make_llm()
        with pytest.raises(EmptyContentError):
            await ContentAnalyzer(llm).analyze_contents([])
        assert llm.call_count == 0

    @pytest.mark.asyncio
    async def test_analysis(self, make_llm, analysis_json, sample_content):
        llm = make_llm([analysis_json])
        result = await ContentAnalyzer(llm).analyze_contents([sample_content])

        assert llm.call_count == 1
        assert "东京三日美食之旅" in llm.prompts[0]
        assert result.quality_score == 85
        assert result.locations[0].name == "筑地市场"
        assert result.activities[0].category == "DINING"
        assert result.recommendations[0].title == "早点去筑地市场"

    @pytest.mark.asyncio
    async def test_malformed_output(self, make_llm, sample_content):
        with pytest.raises(MalformedModelOutputError):
            await ContentAnalyzer(make_llm(["抱歉，我无法分析"])).analyze_contents([sample_content])

    @pytest.mark.asyncio
    async def test_llm_failure_is_wrapped(self, make_llm, sample_content):
        with pytest.raises(ContentAnalysisError, match="内容分析失败"):
            await ContentAnalyzer(make_llm([RuntimeError("503")])).analyze_contents([sample_content])


class TestQualityAnalysis:
    """单条质量评估测试"""

    @pytest.mark.asyncio
    async def test_quality_report(self, make_llm, sample_content):
        llm = make_llm(['{"quality_score": 90, "relevance_score": 80, "completeness_score": 70}'])
        report = await ContentAnalyzer(llm).analyze_content_quality(sample_content)
        assert (report.quality_score, report.relevance_score, report.completeness_score) == (90, 80, 70)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", ["不是JSON", RuntimeError("503")])
    async def test_failure_returns_neutral(self, make_llm, sample_content, response):
        report = await ContentAnalyzer(make_llm([response])).analyze_content_quality(sample_content)
        assert report.quality_score == 50
        assert report.issues == ["分析失败"]


class TestLocalInsights:
    """本地地点/活动统计测试"""

    def test_location_insights_merge_by_name(self, make_llm):
        contents = [
            make_content("a", locations=["成都市", "宽窄巷子"], likes=1000),
            make_content("b", locations=["成都市"], likes=0),
        ]
        insights = ContentAnalyzer(make_llm()).extract_location_insights(contents)

        names = [i.name for i in insights]
        assert names == ["成都市", "宽窄巷子"]
        chengdu = insights[0]
        assert chengdu.mentioned_count == 2
        assert chengdu.type == "CITY"
        # (300 / 2) / 100 + 2 * 10
        assert chengdu.popularity_score == pytest.approx(21.5)

    def test_related_activities(self, make_llm):
        activities = [ExtractedActivity(name=f"活动{i}") for i in range(7)]
        contents = [make_content("a", locations=["西湖"], activities=activities)]
        insight = ContentAnalyzer(make_llm()).extract_location_insights(contents)[0]
        assert insight.related_activities == [f"活动{i}" for i in range(5)]

    def test_activity_cost_average(self, make_llm):
        contents = [
            make_content("a", activities=[ExtractedActivity(name="火锅", category="美食", estimated_cost=100)]),
            make_content("b", activities=[ExtractedActivity(name="火锅", estimated_cost=0)]),
            make_content("c", activities=[ExtractedActivity(name="火锅", estimated_cost=200)]),
        ]
        insight = ContentAnalyzer(make_llm()).extract_activity_insights(contents)[0]

        assert insight.mentioned_count == 3
        assert insight.estimated_cost == 150
        assert insight.category == "DINING"

    def test_popularity_is_capped(self):
        contents = [make_content("a", locations=["东京"], likes=10_000_000)]
        assert ContentAnalyzer.calculate_location_popularity("东京", contents) == 100


class TestClassification:
    def test_location_type(self):
        assert classify_location_type("杭州市") == "CITY"
        assert classify_location_type("颐和园公园") == "ATTRACTION"
        assert classify_location_type("南京路") == "DISTRICT"
        assert classify_location_type("东方明珠") == "LANDMARK"

    def test_activity_category(self):
        assert classify_activity_category("购物体验") == "SHOPPING"
        assert classify_activity_category("") == "SIGHTSEEING"

    def test_difficulty(self):
        assert assess_difficulty("很有挑战的徒步") == "HARD"
        assert assess_difficulty("需要提前预约") == "MODERATE"
        assert assess_difficulty("轻松散步") == "EASY"

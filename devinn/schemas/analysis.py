"""
内容分析数据模式

字段沿用模型输出的 snake_case 键名；所有分数在校验时被限制到 [0, 100]。
"""

from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator

from devinn.schemas.base import clamp_score, none_to_list, normalize_choice

LOCATION_TYPES = ("CITY", "ATTRACTION", "DISTRICT", "LANDMARK")
ACTIVITY_CATEGORIES = ("SIGHTSEEING", "DINING", "SHOPPING", "ENTERTAINMENT", "CULTURE", "NATURE", "ADVENTURE")
DIFFICULTY_LEVELS = ("EASY", "MODERATE", "HARD")
SENTIMENTS = ("POSITIVE", "NEUTRAL", "NEGATIVE")
DESTINATION_TYPES = ("URBAN", "NATURE", "CULTURAL", "BEACH", "ADVENTURE", "MIXED")
BUDGET_LEVELS = ("BUDGET", "MID_RANGE", "LUXURY", "MIXED")


def _coerce_count(value: Any) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1


def _coerce_str_list(value: Any) -> Any:
    """模型偶尔把列表字段写成单个字符串"""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class LocationInsight(BaseModel):
    """地点洞察"""
    name: str = Field(..., description="地点名称")
    type: str = Field("LANDMARK", description="CITY|ATTRACTION|DISTRICT|LANDMARK")
    coordinates: Optional[Tuple[float, float]] = Field(None, description="坐标 [纬度, 经度]")
    popularity_score: float = Field(50, description="热度 0-100")
    mentioned_count: int = Field(1, description="提及次数")
    related_activities: List[str] = Field(default_factory=list)
    best_time_to_visit: Optional[str] = None
    estimated_duration: Optional[int] = Field(None, description="建议游览时长（分钟）")

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return normalize_choice(v, LOCATION_TYPES, "LANDMARK")

    @field_validator("popularity_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)

    @field_validator("mentioned_count", mode="before")
    @classmethod
    def _count(cls, v):
        return _coerce_count(v)

    @field_validator("related_activities", mode="before")
    @classmethod
    def _list(cls, v):
        return _coerce_str_list(v)

    @field_validator("coordinates", mode="before")
    @classmethod
    def _coordinates(cls, v):
        if not isinstance(v, (list, tuple)) or len(v) != 2:
            return None
        return v


class ActivityInsight(BaseModel):
    """活动洞察"""
    name: str = Field(..., description="活动名称")
    category: str = Field("SIGHTSEEING", description="活动类别")
    popularity_score: float = Field(50, description="热度 0-100")
    mentioned_count: int = Field(1, description="提及次数")
    estimated_cost: Optional[float] = None
    duration: Optional[int] = Field(None, description="持续时间（分钟）")
    difficulty_level: str = Field("EASY", description="EASY|MODERATE|HARD")
    best_season: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return normalize_choice(v, ACTIVITY_CATEGORIES, "SIGHTSEEING")

    @field_validator("difficulty_level", mode="before")
    @classmethod
    def _difficulty(cls, v):
        return normalize_choice(v, DIFFICULTY_LEVELS, "EASY")

    @field_validator("popularity_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)

    @field_validator("mentioned_count", mode="before")
    @classmethod
    def _count(cls, v):
        return _coerce_count(v)

    @field_validator("best_season", "tips", mode="before")
    @classmethod
    def _list(cls, v):
        return _coerce_str_list(v)

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _cost(cls, v):
        try:
            return None if v is None else max(0.0, float(v))
        except (TypeError, ValueError):
            return None


class SentimentAnalysis(BaseModel):
    overall_sentiment: str = "NEUTRAL"
    enthusiasm_level: float = 50
    recommendation_strength: float = 50
    concerns: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)

    @field_validator("overall_sentiment", mode="before")
    @classmethod
    def _sentiment(cls, v):
        return normalize_choice(v, SENTIMENTS, "NEUTRAL")

    @field_validator("enthusiasm_level", "recommendation_strength", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)

    @field_validator("concerns", "highlights", mode="before")
    @classmethod
    def _list(cls, v):
        return _coerce_str_list(v)


class DurationRecommendation(BaseModel):
    min_days: int = 1
    max_days: int = 3
    optimal_days: int = 2

    @model_validator(mode="after")
    def _ordered(self):
        self.min_days = max(1, self.min_days)
        self.max_days = max(self.min_days, self.max_days)
        self.optimal_days = min(max(self.optimal_days, self.min_days), self.max_days)
        return self


class TravelInsights(BaseModel):
    destination_type: str = "MIXED"
    travel_style: List[str] = Field(default_factory=list)
    budget_level: str = "MID_RANGE"
    target_audience: List[str] = Field(default_factory=list)
    seasonal_preferences: List[str] = Field(default_factory=list)
    duration_recommendation: DurationRecommendation = Field(default_factory=DurationRecommendation)

    @field_validator("destination_type", mode="before")
    @classmethod
    def _destination(cls, v):
        return normalize_choice(v, DESTINATION_TYPES, "MIXED")

    @field_validator("budget_level", mode="before")
    @classmethod
    def _budget(cls, v):
        return normalize_choice(v, BUDGET_LEVELS, "MID_RANGE")

    @field_validator("travel_style", "target_audience", "seasonal_preferences", mode="before")
    @classmethod
    def _list(cls, v):
        return _coerce_str_list(v)

    @field_validator("duration_recommendation", mode="before")
    @classmethod
    def _duration(cls, v):
        return v if v is not None else DurationRecommendation()


class AnalysisRecommendation(BaseModel):
    type: str = "RECOMMENDED"
    title: str = ""
    description: str = ""
    reason: str = ""


class AnalysisResult(BaseModel):
    """批量内容分析结果"""
    locations: List[LocationInsight] = Field(default_factory=list)
    activities: List[ActivityInsight] = Field(default_factory=list)
    themes: List[str] = Field(default_factory=list)
    quality_score: float = Field(50, description="内容质量 0-100")
    recommendations: List[AnalysisRecommendation] = Field(default_factory=list)
    sentiment: SentimentAnalysis = Field(default_factory=SentimentAnalysis)
    travel_insights: TravelInsights = Field(default_factory=TravelInsights)

    @field_validator("locations", "activities", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return none_to_list(v)

    @field_validator("recommendations", mode="before")
    @classmethod
    def _recommendations(cls, v):
        return [{"title": item} if isinstance(item, str) else item for item in none_to_list(v)]

    @field_validator("themes", mode="before")
    @classmethod
    def _themes(cls, v):
        return _coerce_str_list(v)

    @field_validator("quality_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)

    @field_validator("sentiment", "travel_insights", mode="before")
    @classmethod
    def _defaults(cls, v, info):
        if v is not None:
            return v
        return SentimentAnalysis() if info.field_name == "sentiment" else TravelInsights()


class ContentQualityReport(BaseModel):
    """单条内容质量评估"""
    quality_score: float = 50
    relevance_score: float = 50
    completeness_score: float = 50
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @field_validator("quality_score", "relevance_score", "completeness_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)

    @field_validator("issues", "suggestions", mode="before")
    @classmethod
    def _list(cls, v):
        return _coerce_str_list(v)

    @classmethod
    def neutral(cls) -> "ContentQualityReport":
        """分析失败时返回的中性结果"""
        return cls(
            quality_score=50,
            relevance_score=50,
            completeness_score=50,
            issues=["分析失败"],
            suggestions=["请检查内容格式"],
        )

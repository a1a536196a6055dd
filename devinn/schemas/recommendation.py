"""
个性化推荐数据模式
"""

from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from devinn.schemas.base import none_to_list, normalize_choice

BUDGET_RANGES = ("low", "medium", "high")
TRAVEL_STYLES = ("relaxed", "adventure", "cultural", "luxury")
GROUP_TYPES = ("solo", "couple", "family", "friends")
RECOMMENDATION_TYPES = ("location", "activity", "restaurant", "hotel", "route")


class UserPreferences(BaseModel):
    """推荐用的用户画像，缺省值即默认偏好"""
    budget_range: str = "medium"
    activity_types: List[str] = Field(default_factory=lambda: ["sightseeing", "dining"])
    travel_style: str = "relaxed"
    group_type: str = "couple"
    interests: List[str] = Field(default_factory=lambda: ["culture", "food"])
    avoid_list: List[str] = Field(default_factory=list)

    @field_validator("budget_range", mode="before")
    @classmethod
    def _budget(cls, v):
        return normalize_choice(v, BUDGET_RANGES, "medium")

    @field_validator("travel_style", mode="before")
    @classmethod
    def _style(cls, v):
        return normalize_choice(v, TRAVEL_STYLES, "relaxed")

    @field_validator("group_type", mode="before")
    @classmethod
    def _group(cls, v):
        return normalize_choice(v, GROUP_TYPES, "couple")

    @field_validator("activity_types", "interests", "avoid_list", mode="before")
    @classmethod
    def _lists(cls, v):
        return none_to_list(v)


class RecommendationLocation(BaseModel):
    name: str
    coordinates: Optional[Tuple[float, float]] = None
    address: Optional[str] = None


class RecommendationTiming(BaseModel):
    best_time: Optional[str] = None
    duration: Optional[str] = None
    season: Optional[str] = None


class RecommendationCost(BaseModel):
    estimated_price: float = 0
    price_range: str = ""
    currency: str = "CNY"


class RecommendationMetadata(BaseModel):
    location: Optional[RecommendationLocation] = None
    timing: Optional[RecommendationTiming] = None
    cost: Optional[RecommendationCost] = None
    tags: List[str] = Field(default_factory=list)
    popularity_score: float = 0


class Recommendation(BaseModel):
    id: str
    type: str = "activity"
    title: str
    description: str = ""
    score: float = Field(0, ge=0, le=1)
    reasons: List[str] = Field(default_factory=list)
    metadata: RecommendationMetadata = Field(default_factory=RecommendationMetadata)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return normalize_choice(v, RECOMMENDATION_TYPES, "activity")


class Alternative(BaseModel):
    """未进入推荐列表的备选内容"""
    title: str
    description: str = ""
    score: float = Field(0.6, ge=0, le=1)
    why_alternative: str = ""


class RecommendationResult(BaseModel):
    recommendations: List[Recommendation] = Field(default_factory=list)
    confidence_score: int = Field(0, ge=0, le=100)
    reasoning: str = ""
    alternatives: List[Alternative] = Field(default_factory=list)

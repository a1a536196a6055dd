"""
旅行计划数据模式
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from pydantic import Field, field_validator, model_validator

from devinn.schemas.base import CamelModel, none_to_list, normalize_choice
from devinn.schemas.booking import FlightOption, HotelOption
from devinn.schemas.content import ActivityType
from devinn.tools.text_utils import safe_number


def _parse_datetime(v):
    """解析日期时间，确保无时区信息"""
    if isinstance(v, str):
        try:
            dt = datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError:
            # 如果解析失败，尝试其他格式
            from dateutil import parser
            dt = parser.parse(v)
        return dt.replace(tzinfo=None)
    if isinstance(v, datetime):
        return v.replace(tzinfo=None)
    return v


def _non_negative_number(v) -> float:
    return max(0.0, safe_number(v))


class UserRequirements(CamelModel):
    """用户出行需求"""
    duration: int = Field(..., ge=1, le=30, description="旅行天数")
    travelers: int = Field(..., ge=1, le=20, description="出行人数")
    budget: Optional[float] = Field(None, ge=0, le=1_000_000, description="预算")
    travel_style: List[str] = Field(default_factory=list, max_length=5, description="旅行风格")
    interests: List[str] = Field(default_factory=list, max_length=10, description="兴趣偏好")
    dietary_restrictions: Optional[List[str]] = Field(None, max_length=5, description="饮食限制")
    accessibility: Optional[List[str]] = Field(None, max_length=5, description="无障碍需求")
    free_text: Optional[str] = Field(None, max_length=1000, description="其他要求")

    @field_validator("travel_style", "interests", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return none_to_list(v)


class NearbyLandmark(CamelModel):
    name: str
    distance: float = 0
    walking_time: int = 0


class LocationInfo(CamelModel):
    name: str = Field("", description="地点名称")
    address: str = Field("", description="地址")
    coordinates: Tuple[float, float] = Field((0.0, 0.0), description="坐标 [纬度, 经度]")
    district: Optional[str] = None
    nearby_landmarks: Optional[List[NearbyLandmark]] = None

    @field_validator("coordinates", mode="before")
    @classmethod
    def _coordinates(cls, v):
        if isinstance(v, (list, tuple)) and len(v) == 2:
            return v
        if isinstance(v, dict) and "lat" in v and ("lng" in v or "lon" in v):
            return (v["lat"], v.get("lng", v.get("lon")))
        return (0.0, 0.0)


class BookingInfo(CamelModel):
    url: str
    provider: str
    price: Optional[float] = None
    availability: Optional[str] = None


class WeatherInfo(CamelModel):
    temperature: Dict[str, float] = Field(default_factory=lambda: {"min": 0, "max": 0})
    condition: str = ""
    humidity: float = 0
    precipitation: float = 0
    wind_speed: float = 0


class TravelActivity(CamelModel):
    """行程中的单个活动"""
    id: str = Field("", description="活动ID")
    order: int = Field(1, description="当日顺序，从1开始")
    start_time: str = Field("09:00", description="开始时间 HH:MM")
    end_time: str = Field("10:00", description="结束时间 HH:MM")
    type: ActivityType = Field(ActivityType.ACTIVITY, description="活动类型")
    title: str = Field("", description="活动标题")
    description: str = Field("", description="活动描述")
    location: LocationInfo = Field(default_factory=LocationInfo, description="地点")
    estimated_cost: float = Field(0, description="预估费用（每人）")
    tips: List[str] = Field(default_factory=list)
    booking_info: Optional[BookingInfo] = None

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return normalize_choice(v, [t.value for t in ActivityType], ActivityType.ACTIVITY.value)

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _cost(cls, v):
        return _non_negative_number(v)

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v):
        if v is None:
            return LocationInfo()
        if isinstance(v, str):
            return {"name": v, "address": v}
        return v

    @field_validator("tips", mode="before")
    @classmethod
    def _tips(cls, v):
        if isinstance(v, str):
            return [v]
        return none_to_list(v)


class DailySummary(CamelModel):
    total_cost: float = 0
    walking_distance: float = 0
    highlights: List[str] = Field(default_factory=list)

    @field_validator("highlights", mode="before")
    @classmethod
    def _highlights(cls, v):
        return none_to_list(v)


class TravelDay(CamelModel):
    """行程中的一天"""
    day_number: int = Field(1, description="第几天，从1开始")
    date: str = Field("", description="日期 YYYY-MM-DD")
    title: str = Field("", description="当日标题")
    theme: str = Field("", description="当日主题")
    weather: Optional[WeatherInfo] = None
    activities: List[TravelActivity] = Field(default_factory=list)
    daily_summary: DailySummary = Field(default_factory=DailySummary)

    @field_validator("activities", mode="before")
    @classmethod
    def _activities(cls, v):
        return none_to_list(v)

    @field_validator("daily_summary", mode="before")
    @classmethod
    def _summary(cls, v):
        return v if v is not None else DailySummary()


class BudgetBreakdown(CamelModel):
    accommodation: float = 0
    food: float = 0
    activities: float = 0
    transport: float = 0

    @field_validator("accommodation", "food", "activities", "transport", mode="before")
    @classmethod
    def _number(cls, v):
        return _non_negative_number(v)


class EstimatedBudget(CamelModel):
    min: float = 0
    max: float = 0
    breakdown: BudgetBreakdown = Field(default_factory=BudgetBreakdown)

    @field_validator("min", "max", mode="before")
    @classmethod
    def _number(cls, v):
        return _non_negative_number(v)

    @model_validator(mode="after")
    def _ordered(self):
        if self.min > self.max:
            self.min, self.max = self.max, self.min
        return self


class TravelPlan(CamelModel):
    """完整旅行计划"""
    id: Optional[str] = Field(None, description="计划ID，由调用方设置")
    title: str = Field(..., description="计划标题")
    destination: str = Field(..., description="目的地")
    total_days: int = Field(1, ge=1, description="总天数")
    estimated_budget: EstimatedBudget = Field(default_factory=EstimatedBudget)
    days: List[TravelDay] = Field(default_factory=list)
    flights: List[FlightOption] = Field(default_factory=list)
    hotels: List[HotelOption] = Field(default_factory=list)
    note_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        return _parse_datetime(v)

    @field_validator("days", "flights", "hotels", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return none_to_list(v)

    @field_validator("estimated_budget", mode="before")
    @classmethod
    def _budget(cls, v):
        return v if v is not None else EstimatedBudget()

    @property
    def activity_count(self) -> int:
        return sum(len(day.activities) for day in self.days)


# ============================================================================
# AI 指令与对话
# ============================================================================

COMMAND_ACTIONS = ("MOVE", "REPLACE", "ADD", "REMOVE", "OPTIMIZE", "QUERY")
COMMAND_SCOPES = ("SINGLE", "DAY", "TRIP")
STEP_TYPES = ("MODIFY", "QUERY", "CALCULATE")
IMPACT_LEVELS = ("LOW", "MEDIUM", "HIGH")


class ParsedIntent(CamelModel):
    action: str = "QUERY"
    target: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)
    scope: str = "SINGLE"

    @field_validator("action", mode="before")
    @classmethod
    def _action(cls, v):
        return normalize_choice(v, COMMAND_ACTIONS, "QUERY")

    @field_validator("scope", mode="before")
    @classmethod
    def _scope(cls, v):
        return normalize_choice(v, COMMAND_SCOPES, "SINGLE")

    @field_validator("parameters", mode="before")
    @classmethod
    def _parameters(cls, v):
        return v if isinstance(v, dict) else {}


class ExecutionStep(CamelModel):
    description: str = ""
    type: str = "MODIFY"
    estimated_time: int = 0

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return normalize_choice(v, STEP_TYPES, "MODIFY")


class ExecutionPlan(CamelModel):
    steps: List[ExecutionStep] = Field(default_factory=list)
    affected_items: List[str] = Field(default_factory=list)
    estimated_impact: str = "LOW"

    @field_validator("estimated_impact", mode="before")
    @classmethod
    def _impact(cls, v):
        return normalize_choice(v, IMPACT_LEVELS, "LOW")

    @field_validator("steps", "affected_items", mode="before")
    @classmethod
    def _lists(cls, v):
        return none_to_list(v)


class CommandConfirmation(CamelModel):
    required: bool = False
    message: str = ""
    risks: List[str] = Field(default_factory=list)


class AICommand(CamelModel):
    """自然语言指令的解析结果"""
    id: Optional[str] = None
    user_input: str = ""
    parsed_intent: ParsedIntent = Field(default_factory=ParsedIntent)
    execution_plan: ExecutionPlan = Field(default_factory=ExecutionPlan)
    confirmation: CommandConfirmation = Field(default_factory=CommandConfirmation)


class ChatMessage(CamelModel):
    id: Optional[str] = None
    type: str = Field("USER", description="USER|ASSISTANT")
    content: str
    timestamp: Optional[datetime] = None

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return normalize_choice(v, ("USER", "ASSISTANT"), "USER")

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        return _parse_datetime(v)

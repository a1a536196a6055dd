"""
平台内容提取数据模式
"""

from enum import Enum
from typing import List, Optional, Tuple
from pydantic import ConfigDict, Field, field_validator

from devinn.schemas.base import CamelModel, none_to_list


class Platform(str, Enum):
    """支持的内容平台"""
    XIAOHONGSHU = "XIAOHONGSHU"
    BILIBILI = "BILIBILI"
    DOUYIN = "DOUYIN"
    MAFENGWO = "MAFENGWO"


class ActivityType(str, Enum):
    """行程项目类型"""
    ATTRACTION = "ATTRACTION"
    RESTAURANT = "RESTAURANT"
    HOTEL = "HOTEL"
    TRANSPORT = "TRANSPORT"
    ACTIVITY = "ACTIVITY"


class MediaType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class _FrozenModel(CamelModel):
    model_config = ConfigDict(frozen=True)


class ExtractedLocation(_FrozenModel):
    """内容中提到的地点"""
    name: str = Field(..., description="地点名称")
    address: Optional[str] = Field(None, description="地址")
    coordinates: Optional[Tuple[float, float]] = Field(None, description="坐标 [纬度, 经度]")
    type: ActivityType = Field(ActivityType.ATTRACTION, description="地点类型")


class ExtractedActivity(_FrozenModel):
    """内容中提到的活动"""
    name: str = Field(..., description="活动名称")
    description: str = Field("", description="活动描述")
    category: str = Field("", description="活动分类")
    estimated_cost: Optional[float] = Field(None, ge=0, description="预估费用")
    duration: Optional[int] = Field(None, ge=0, description="持续时间（分钟）")
    tips: Tuple[str, ...] = Field((), description="实用建议")


class MediaItem(_FrozenModel):
    type: MediaType = Field(..., description="媒体类型")
    url: str = Field(..., description="媒体地址")
    caption: Optional[str] = Field(None, description="说明文字")
    timestamp: Optional[int] = Field(None, description="视频时长（秒）")


class Author(_FrozenModel):
    name: str = Field(..., description="作者昵称")
    avatar: Optional[str] = Field(None, description="头像地址")


class ContentStats(_FrozenModel):
    """互动数据，均为非负整数"""
    likes: int = Field(0, ge=0)
    comments: int = Field(0, ge=0)
    shares: int = Field(0, ge=0)


class ExtractedContent(_FrozenModel):
    """单条平台内容的结构化提取结果（不可变）"""
    title: str = Field(..., description="标题")
    description: str = Field("", description="正文摘要")
    platform: Platform = Field(..., description="来源平台")
    locations: Tuple[ExtractedLocation, ...] = Field((), description="地点")
    activities: Tuple[ExtractedActivity, ...] = Field((), description="活动")
    media: Tuple[MediaItem, ...] = Field((), description="图片/视频")
    tags: Tuple[str, ...] = Field((), description="标签")
    author: Author = Field(default_factory=lambda: Author(name="未知用户"), description="作者")
    stats: ContentStats = Field(default_factory=ContentStats, description="互动数据")

    @field_validator("locations", "activities", "media", "tags", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return none_to_list(v)


class ExtractionResult(CamelModel):
    """提取服务对单个 URL 的返回结果，失败时不抛异常"""
    success: bool
    data: Optional[ExtractedContent] = None
    error: Optional[str] = None
    platform: Optional[Platform] = None
    url: Optional[str] = None

    @classmethod
    def ok(cls, data: ExtractedContent, url: Optional[str] = None) -> "ExtractionResult":
        return cls(success=True, data=data, platform=data.platform, url=url)

    @classmethod
    def fail(cls, error: str, platform: Optional[Platform] = None, url: Optional[str] = None) -> "ExtractionResult":
        return cls(success=False, error=error, platform=platform, url=url)

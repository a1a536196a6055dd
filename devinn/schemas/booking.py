"""
航班/酒店建议数据模式

仅用于行程中的参考建议，嵌套较深的部分保留为字典。
"""

from typing import Any, Dict, List, Optional, Tuple
from pydantic import ConfigDict, Field

from devinn.schemas.base import CamelModel


class Airport(CamelModel):
    code: str
    name: str
    terminal: str = ""


class FlightEndpoint(CamelModel):
    airport: Airport
    time: str
    date: str


class FlightOption(CamelModel):
    """航班建议"""
    model_config = ConfigDict(extra="allow")

    id: str
    type: str = Field("OUTBOUND", description="OUTBOUND|RETURN")
    airline: Dict[str, str] = Field(default_factory=dict)
    flight_number: str = ""
    aircraft: str = ""
    departure: FlightEndpoint
    arrival: FlightEndpoint
    duration: Dict[str, Any] = Field(default_factory=dict)
    stops: List[Dict[str, Any]] = Field(default_factory=list)
    price: Dict[str, Any] = Field(default_factory=dict)
    cabin: Dict[str, Any] = Field(default_factory=dict)
    booking: Dict[str, Any] = Field(default_factory=dict)
    rating: Dict[str, float] = Field(default_factory=dict)


class HotelLocation(CamelModel):
    address: str
    district: str = ""
    coordinates: Tuple[float, float] = (0.0, 0.0)
    nearby_landmarks: List[Dict[str, Any]] = Field(default_factory=list)
    transportation: List[Dict[str, Any]] = Field(default_factory=list)


class HotelRoom(CamelModel):
    type: str
    size: float = 0
    bed_type: str = ""
    max_occupancy: int = 2
    amenities: List[str] = Field(default_factory=list)
    pricing: Dict[str, Any] = Field(default_factory=dict)


class HotelOption(CamelModel):
    """酒店建议"""
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    brand: Optional[str] = None
    category: str = ""
    star_rating: int = 0
    location: HotelLocation
    rooms: List[HotelRoom] = Field(default_factory=list)
    amenities: Dict[str, List[str]] = Field(default_factory=dict)
    reviews: Dict[str, Any] = Field(default_factory=dict)
    policies: Dict[str, Any] = Field(default_factory=dict)
    booking: Dict[str, Any] = Field(default_factory=dict)
    images: List[Dict[str, str]] = Field(default_factory=list)

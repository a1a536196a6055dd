"""
地理距离计算

路线优化只关心相对远近，默认直接对经纬度求欧氏距离；
需要真实公里数时使用 HaversineDistance。
"""

import math
from abc import ABC, abstractmethod
from typing import Sequence

EARTH_RADIUS_KM = 6371.0
WALKING_SPEED_KMH = 5.0


class DistanceMetric(ABC):
    """两点距离度量，坐标为 (纬度, 经度)"""

    name: str = "base"

    @abstractmethod
    def distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        ...


class EuclideanDistance(DistanceMetric):
    """经纬度上的平面欧氏距离（单位：度）"""

    name = "euclidean"

    def distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)


class HaversineDistance(DistanceMetric):
    """球面大圆距离（单位：公里）"""

    name = "haversine"

    def distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        lat1, lon1 = math.radians(a[0]), math.radians(a[1])
        lat2, lon2 = math.radians(b[0]), math.radians(b[1])
        d_lat = lat2 - lat1
        d_lon = lon2 - lon1
        h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
        return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


_METRICS = {
    EuclideanDistance.name: EuclideanDistance,
    HaversineDistance.name: HaversineDistance,
}


def get_distance_metric(name: str = "euclidean") -> DistanceMetric:
    """按名称获取距离度量，未知名称抛出 ValueError"""
    try:
        return _METRICS[(name or "euclidean").lower()]()
    except KeyError:
        raise ValueError(f"未知的距离度量: {name}")


def calculate_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """两点间的球面距离（公里）"""
    return HaversineDistance().distance(a, b)


def calculate_walking_time(distance_km: float) -> int:
    """按 5km/h 步行速度估算分钟数"""
    return round(distance_km / WALKING_SPEED_KMH * 60)

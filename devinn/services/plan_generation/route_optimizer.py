"""
行程路线与时间优化
"""

from typing import List, Optional, Sequence, Tuple
from loguru import logger

from devinn.schemas.content import ActivityType
from devinn.schemas.travel_plan import TravelActivity
from devinn.tools.geo import DistanceMetric, EuclideanDistance

DAY_START_MINUTES = 9 * 60
BUFFER_MINUTES = 30
DEFAULT_DURATION_MINUTES = 120

# 各类型活动的预估时长（分钟）
ACTIVITY_DURATIONS = {
    ActivityType.ATTRACTION: 180,
    ActivityType.RESTAURANT: 90,
    ActivityType.HOTEL: 60,
    ActivityType.TRANSPORT: 30,
    ActivityType.ACTIVITY: 120,
}


def minutes_to_time_string(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def estimate_activity_duration(activity_type: ActivityType) -> int:
    return ACTIVITY_DURATIONS.get(activity_type, DEFAULT_DURATION_MINUTES)


class RouteOptimizer:
    """基于最近邻的路线优化器"""

    def __init__(self, metric: Optional[DistanceMetric] = None):
        self.metric = metric or EuclideanDistance()

    def optimize_route(
        self,
        activities: Sequence[TravelActivity],
        start_location: Optional[Tuple[float, float]] = None,
    ) -> List[TravelActivity]:
        """
        优化当日活动顺序并重新排时间

        输出总是输入的一个排列；内部出错时原样返回输入。
        """
        activities = list(activities)
        if len(activities) <= 1:
            return activities

        try:
            ordered = self.order_by_location(activities, start_location)
            return self.optimize_time_schedule(ordered)
        except Exception as e:
            logger.error(f"路线优化失败: {e}")
            return activities

    def order_by_location(
        self,
        activities: Sequence[TravelActivity],
        start_location: Optional[Tuple[float, float]] = None,
    ) -> List[TravelActivity]:
        """贪心最近邻：每次选离当前位置最近的下一个活动，距离相同取靠前者"""
        remaining = list(activities)
        if len(remaining) <= 1:
            return remaining

        current = start_location or remaining[0].location.coordinates
        ordered: List[TravelActivity] = []

        while remaining:
            nearest_index = 0
            nearest_distance = self.metric.distance(current, remaining[0].location.coordinates)
            for index in range(1, len(remaining)):
                distance = self.metric.distance(current, remaining[index].location.coordinates)
                if distance < nearest_distance:
                    nearest_distance = distance
                    nearest_index = index

            nearest = remaining.pop(nearest_index)
            ordered.append(nearest)
            current = nearest.location.coordinates

        return ordered

    @staticmethod
    def optimize_time_schedule(activities: Sequence[TravelActivity]) -> List[TravelActivity]:
        """从 09:00 开始按类型时长排布，活动之间留 30 分钟缓冲，order 重排为 1..N"""
        current = DAY_START_MINUTES
        scheduled = []
        for index, activity in enumerate(activities):
            duration = estimate_activity_duration(activity.type)
            scheduled.append(activity.model_copy(update={
                "order": index + 1,
                "start_time": minutes_to_time_string(current),
                "end_time": minutes_to_time_string(current + duration),
            }))
            current += duration + BUFFER_MINUTES
        return scheduled

"""
旅行方案生成模块
"""

from .budget_calculator import BudgetCalculator
from .route_optimizer import RouteOptimizer, estimate_activity_duration, minutes_to_time_string
from .booking_suggestions import BookingSuggestionService

__all__ = [
    'BudgetCalculator',
    'RouteOptimizer',
    'BookingSuggestionService',
    'estimate_activity_duration',
    'minutes_to_time_string',
]

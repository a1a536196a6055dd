"""
平台内容提取器
"""

from .base import BaseExtractor, ExtractionPolicy
from .xiaohongshu import XiaohongshuExtractor
from .bilibili import BilibiliExtractor
from .douyin import DouyinExtractor
from .mafengwo import MafengwoExtractor

__all__ = [
    'BaseExtractor',
    'ExtractionPolicy',
    'XiaohongshuExtractor',
    'BilibiliExtractor',
    'DouyinExtractor',
    'MafengwoExtractor',
]

"""
链接识别工具
"""

from typing import Optional
from urllib.parse import urlparse

from devinn.schemas.content import Platform

# 域名片段 -> 平台
PLATFORM_DOMAINS = (
    ("xiaohongshu.com", Platform.XIAOHONGSHU),
    ("xhslink.com", Platform.XIAOHONGSHU),
    ("bilibili.com", Platform.BILIBILI),
    ("b23.tv", Platform.BILIBILI),
    ("douyin.com", Platform.DOUYIN),
    ("mafengwo.cn", Platform.MAFENGWO),
)

UNSUPPORTED_LINK_MESSAGE = "暂不支持该平台，请输入小红书、B站、抖音或马蜂窝的链接"


def is_valid_url(url: str) -> bool:
    """只接受带 scheme 和域名的 http(s) 链接"""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_platform(url: str) -> Optional[Platform]:
    """根据域名识别平台，无法识别返回 None"""
    if not is_valid_url(url):
        return None
    hostname = (urlparse(url.strip()).hostname or "").lower()
    for domain, platform in PLATFORM_DOMAINS:
        if domain in hostname:
            return platform
    return None


def is_supported_link(url: str) -> bool:
    return extract_platform(url) is not None

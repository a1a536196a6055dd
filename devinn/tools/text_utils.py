"""
文本处理工具：数字/时长解析、格式化
"""

import re
from typing import Any, List, Optional

# 货币符号
CURRENCY_SYMBOLS = {
    "CNY": "¥",
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "KRW": "₩",
}

# 不带小数位的货币
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW"}

_NUMBER_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")
_DURATION_PATTERN = re.compile(r"(?:(\d+):)?(\d+):(\d+)")
_CHINESE_WORD_PATTERN = re.compile(r"[一-龥]{2,}")
_SIGNED_NUMBER_PATTERN = re.compile(r"(-?\d+(?:\.\d+)?)")


def safe_number(value: Any) -> float:
    """将带有货币符号/中文单位的字符串安全转为数字，失败返回0"""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if number == number else 0.0
    if isinstance(value, str):
        match = _SIGNED_NUMBER_PATTERN.search(value.replace(",", ""))
        if match:
            return float(match.group(1))
    return 0.0


def parse_count(text: Optional[str]) -> int:
    """
    解析点赞/评论等计数文本

    "1.2万" -> 12000, "3千" -> 3000, "500" -> 500，无法解析返回 0
    """
    if not text:
        return 0
    cleaned = text.replace(",", "").strip()
    match = _NUMBER_PATTERN.search(cleaned)
    if not match:
        return 0

    value = float(match.group(1))
    if "万" in cleaned:
        value *= 10000
    elif "千" in cleaned:
        value *= 1000
    return max(0, round(value))


def parse_social_count(text: Optional[str]) -> int:
    """抖音计数：额外支持 k/K 后缀，结果向下取整"""
    if not text:
        return 0
    cleaned = text.replace(",", "").strip()
    match = _NUMBER_PATTERN.search(cleaned)
    if not match:
        return 0

    value = float(match.group(1))
    if "万" in cleaned:
        value *= 10000
    elif "k" in cleaned.lower():
        value *= 1000
    elif "千" in cleaned:
        value *= 1000
    return max(0, int(value))


def parse_duration(text: Optional[str]) -> Optional[int]:
    """解析 "HH:MM:SS" 或 "MM:SS" 为秒数"""
    if not text:
        return None
    match = _DURATION_PATTERN.search(text)
    if not match:
        return None
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2))
    seconds = int(match.group(3))
    return hours * 3600 + minutes * 60 + seconds


def format_currency(amount: float, currency: str = "CNY") -> str:
    """格式化金额，如 ¥1,234.50 / ¥1,235（日元）"""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    if currency in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"


def format_duration(minutes: int) -> str:
    """分钟数格式化为中文时长"""
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}分钟"
    if mins == 0:
        return f"{hours}小时"
    return f"{hours}小时{mins}分钟"


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max(0, max_length - 3)] + "..."


def get_error_message(error: object) -> str:
    """从任意异常对象中取出可读的错误信息"""
    if isinstance(error, BaseException):
        return str(error) or error.__class__.__name__
    if isinstance(error, str) and error:
        return error
    return "未知错误"


def extract_chinese_keywords(text: str, limit: int = 5) -> List[str]:
    """提取连续两个及以上汉字的词，保持出现顺序"""
    return _CHINESE_WORD_PATTERN.findall(text or "")[:limit]

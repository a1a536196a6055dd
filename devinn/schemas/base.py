"""
数据模式基类
"""

from typing import Any, Iterable
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Python 侧使用 snake_case，JSON 侧使用 camelCase"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """按 camelCase 输出可直接 JSON 序列化的字典"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


def clamp_score(value: Any, default: float = 50) -> float:
    """分数限制在 [0, 100]，缺失或非数字时取默认值"""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    return max(0.0, min(100.0, number))


def normalize_choice(value: Any, allowed: Iterable[str], default: str) -> str:
    """大小写不敏感地匹配枚举值，匹配不上取默认值"""
    if isinstance(value, str):
        upper = value.strip().upper()
        for option in allowed:
            if option.upper() == upper:
                return option
    return default


def none_to_list(value: Any) -> Any:
    return [] if value is None else value

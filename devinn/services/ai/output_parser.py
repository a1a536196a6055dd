"""
模型输出解析

去掉 Markdown 代码块后按 JSON 解析，再用 pydantic 模型校验。
任何一步失败都抛出 MalformedModelOutputError，解析层不做重试。
"""

import json
import re
from typing import Any, Type, TypeVar
from loguru import logger
from pydantic import BaseModel, ValidationError

from devinn.core.exceptions import MalformedModelOutputError

ModelT = TypeVar("ModelT", bound=BaseModel)


def clean_llm_response(response: str) -> str:
    """清理LLM响应，去掉代码块标记"""
    cleaned = re.sub(r'```json\s*', '', response or "")
    cleaned = re.sub(r'```\s*$', '', cleaned)
    cleaned = re.sub(r'```\s*', '', cleaned)
    return cleaned.strip()


def _extract_json_block(text: str) -> str:
    """模型在 JSON 前后附带说明文字时，截取最外层的对象/数组"""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    end = max(text.rfind("}"), text.rfind("]"))
    return text[start:end + 1] if end > start else text


def parse_json_output(raw: str, error_message: str = "AI返回结果格式错误") -> Any:
    """解析模型返回的 JSON"""
    cleaned = clean_llm_response(raw)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(_extract_json_block(cleaned))
    except json.JSONDecodeError as e:
        logger.error(f"❌ 模型输出JSON解析失败: {e}, 原始内容: {cleaned[:200]}")
        raise MalformedModelOutputError(error_message, raw_response=raw) from e


def decode_model_output(raw: str, model: Type[ModelT], error_message: str = "AI返回结果格式错误") -> ModelT:
    """解析并校验模型输出"""
    data = parse_json_output(raw, error_message)
    return validate_model_output(data, model, raw, error_message)


def validate_model_output(data: Any, model: Type[ModelT], raw: str, error_message: str = "AI返回结果格式错误") -> ModelT:
    if not isinstance(data, dict):
        raise MalformedModelOutputError(error_message, raw_response=raw)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"❌ 模型输出结构校验失败: {e.error_count()} 处错误")
        raise MalformedModelOutputError(error_message, raw_response=raw) from e

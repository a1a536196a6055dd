"""
Gemini客户端工具
通过 Gemini 的 OpenAI 兼容接口调用，对外只暴露 complete(prompt) -> str
"""

import time
import openai
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from loguru import logger

from devinn.core.config import Settings
from devinn.core.logging_config import elapsed_ms, log_external_api_call

# 安全过滤类别
SAFETY_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


class LLMClient(ABC):
    """文本进、文本出的最小 LLM 接口"""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        ...


class GeminiClient(LLMClient):
    """Gemini客户端"""

    def __init__(self, settings: Settings, client: Optional[openai.AsyncOpenAI] = None):
        self.api_key = settings.GEMINI_API_KEY
        self.api_base = settings.GEMINI_API_BASE
        self.model = settings.GEMINI_MODEL
        self.max_tokens = settings.GEMINI_MAX_OUTPUT_TOKENS
        self.temperature = settings.GEMINI_TEMPERATURE
        self.top_p = settings.GEMINI_TOP_P
        self.top_k = settings.GEMINI_TOP_K
        self.timeout = settings.GEMINI_TIMEOUT
        self.safety_threshold = settings.GEMINI_SAFETY_THRESHOLD

        if not self.api_key:
            logger.warning("⚠️ 未配置 GEMINI_API_KEY，AI 功能调用将失败")

        # 重试由上层 GeminiService 统一控制
        self._client = client or openai.AsyncOpenAI(
            api_key=self.api_key or "missing-key",
            base_url=self.api_base,
            timeout=self.timeout,
            max_retries=0,
        )

    def _safety_settings(self) -> List[Dict[str, str]]:
        return [
            {"category": category, "threshold": self.safety_threshold}
            for category in SAFETY_CATEGORIES
        ]

    async def complete(self, prompt: str) -> str:
        """发送单条用户消息，返回模型文本"""
        start = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                top_p=self.top_p,
                extra_body={
                    "extra_body": {
                        "google": {
                            "top_k": self.top_k,
                            "safety_settings": self._safety_settings(),
                        }
                    }
                },
            )
        except Exception as e:
            log_external_api_call("gemini", self.model, "error", elapsed_ms(start))
            logger.error(f"调用Gemini API失败: {e}")
            raise

        log_external_api_call("gemini", self.model, "success", elapsed_ms(start))
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ValueError("Gemini 返回了空内容")

        logger.debug(f"Gemini API响应: {content[:200]}")
        return content

    def get_client_info(self) -> Dict[str, Any]:
        """获取客户端信息"""
        return {
            "api_base": self.api_base,
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "timeout": self.timeout,
            "has_api_key": bool(self.api_key),
        }

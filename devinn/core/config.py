"""
应用配置管理
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )

    # 基础配置
    APP_NAME: str = os.getenv("APP_NAME", "AI笔记DevInn")
    VERSION: str = os.getenv("VERSION", "1.0.0")
    DEBUG: bool = os.getenv("DEBUG", False)
    APP_ENV: str = os.getenv("APP_ENV", "development")  # development / production

    # 服务器配置
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = os.getenv("PORT", 8000)
    ALLOWED_HOSTS: List[str] = os.getenv("ALLOWED_HOSTS", "*").split(",") if isinstance(os.getenv("ALLOWED_HOSTS", "*"), str) else ["*"]

    # Gemini配置（通过OpenAI兼容接口调用）
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_API_BASE: str = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta/openai/")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")
    GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
    GEMINI_TOP_P: float = float(os.getenv("GEMINI_TOP_P", "0.8"))
    GEMINI_TOP_K: int = int(os.getenv("GEMINI_TOP_K", "40"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8192"))
    GEMINI_TIMEOUT: int = int(os.getenv("GEMINI_TIMEOUT", "120"))  # API超时时间（秒）
    GEMINI_SAFETY_THRESHOLD: str = os.getenv("GEMINI_SAFETY_THRESHOLD", "BLOCK_MEDIUM_AND_ABOVE")

    # LLM重试配置（仅针对网络/接口错误）
    LLM_RETRY_ATTEMPTS: int = int(os.getenv("LLM_RETRY_ATTEMPTS", "3"))
    LLM_RETRY_DELAY: float = float(os.getenv("LLM_RETRY_DELAY", "2.0"))  # 秒，第N次失败后等待 N * delay

    # 内容提取配置
    ENABLE_REAL_EXTRACTION: bool = os.getenv("ENABLE_REAL_EXTRACTION", "false").lower() == "true"
    EXTRACTION_FAILURE_POLICY: str = os.getenv("EXTRACTION_FAILURE_POLICY", "mock")  # mock / propagate
    EXTRACTION_RETRY_ATTEMPTS: int = int(os.getenv("EXTRACTION_RETRY_ATTEMPTS", "3"))
    EXTRACTION_RETRY_DELAY: float = float(os.getenv("EXTRACTION_RETRY_DELAY", "2.0"))

    # 浏览器配置
    BROWSER_HEADLESS: bool = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
    BROWSER_TIMEOUT: int = int(os.getenv("BROWSER_TIMEOUT", "30000"))  # 毫秒
    BROWSER_USER_AGENT: str = os.getenv(
        "BROWSER_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    BROWSER_VIEWPORT_WIDTH: int = int(os.getenv("BROWSER_VIEWPORT_WIDTH", "1920"))
    BROWSER_VIEWPORT_HEIGHT: int = int(os.getenv("BROWSER_VIEWPORT_HEIGHT", "1080"))
    BROWSER_BLOCK_RESOURCES: bool = os.getenv("BROWSER_BLOCK_RESOURCES", "true").lower() == "true"  # 拦截样式/字体/图片

    # 行程规划配置
    ROUTE_DISTANCE_METRIC: str = os.getenv("ROUTE_DISTANCE_METRIC", "euclidean")  # euclidean / haversine

    # 日志配置
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "logs/app.log")
    LOG_MAX_SIZE: str = os.getenv("LOG_MAX_SIZE", "10 MB")  # 单个日志文件最大大小
    LOG_RETENTION: int = int(os.getenv("LOG_RETENTION", "5"))  # 保留的日志文件数量
    LOG_COMPRESSION: str = os.getenv("LOG_COMPRESSION", "zip")  # 日志压缩格式
    LOG_TO_CONSOLE: bool = os.getenv("LOG_TO_CONSOLE", True)  # 是否输出到控制台
    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", True)  # 是否输出到文件

    @property
    def real_extraction_enabled(self) -> bool:
        """生产环境或显式开启时才使用真实浏览器抓取"""
        return self.APP_ENV == "production" or self.ENABLE_REAL_EXTRACTION


# 创建全局配置实例
settings = Settings()

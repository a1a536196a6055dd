"""
自定义异常类

项目中所有业务异常都继承自 DevInnError，API 层据此映射 HTTP 状态码。
"""

from typing import Optional


class DevInnError(Exception):
    """DevInn 基础异常类"""
    pass


# ============================================================================
# 输入校验
# ============================================================================

class InvalidInputError(DevInnError):
    """调用方输入不合法，不应重试"""
    pass


class InvalidURLError(InvalidInputError):
    """URL 格式无效"""
    def __init__(self, url: str, message: str = "无效的URL"):
        super().__init__(f"{message}: {url}")
        self.url = url


class UnsupportedPlatformError(InvalidInputError):
    """不支持的平台"""
    def __init__(self, url: str, message: str = "不支持的平台或无效的URL"):
        super().__init__(message)
        self.url = url


class EmptyContentError(InvalidInputError):
    """没有可供分析或规划的内容"""
    pass


# ============================================================================
# 浏览器
# ============================================================================

class BrowserError(DevInnError):
    """浏览器相关错误的基类"""
    pass


class BrowserNotInitializedError(BrowserError):
    """浏览器尚未初始化"""
    def __init__(self, message: str = "浏览器未初始化"):
        super().__init__(message)


class PageLoadError(BrowserError):
    """页面加载失败"""
    def __init__(self, url: str, message: str = "页面加载失败"):
        super().__init__(f"{message}: {url}")
        self.url = url


class ElementNotFoundError(BrowserError):
    """元素未找到"""
    def __init__(self, selector: str, message: str = "元素未找到"):
        super().__init__(f"{message}: {selector}")
        self.selector = selector


class ScreenshotError(BrowserError):
    """截图失败"""
    pass


# ============================================================================
# 内容提取
# ============================================================================

class ExtractionError(DevInnError):
    """平台内容提取失败（仅在 propagate 策略下抛出）"""
    def __init__(self, platform: str, url: str, message: str = "内容提取失败"):
        super().__init__(f"{message} [{platform}]: {url}")
        self.platform = platform
        self.url = url


# ============================================================================
# LLM
# ============================================================================

class LLMError(DevInnError):
    """LLM 相关错误的基类"""
    pass


class LLMRequestError(LLMError):
    """LLM 调用失败（重试后仍失败）"""
    pass


class MalformedModelOutputError(LLMError):
    """模型输出无法解析为预期结构

    不会在解析层重试，raw_response 保留原始输出便于排查。
    """
    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


# ============================================================================
# 业务流程
# ============================================================================

class ContentAnalysisError(DevInnError):
    """内容分析失败"""
    pass


class PlanGenerationError(DevInnError):
    """旅行计划生成失败"""
    pass


class PlanAdjustmentError(DevInnError):
    """旅行计划调整失败"""
    pass


class CommandParsingError(DevInnError):
    """指令解析失败"""
    pass


class ChatResponseError(DevInnError):
    """AI回复生成失败"""
    pass


class RecommendationError(DevInnError):
    """推荐生成失败"""
    pass

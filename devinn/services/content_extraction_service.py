"""
内容提取服务
识别链接所属平台，分发到对应提取器，并负责重试与批量提取
"""

import asyncio
from typing import Dict, List, Mapping, Optional
from loguru import logger

from devinn.core.exceptions import InvalidInputError
from devinn.schemas.content import ExtractionResult, Platform
from devinn.services.extractors.base import BaseExtractor
from devinn.tools.retry import retry
from devinn.tools.text_utils import get_error_message
from devinn.tools.url_utils import extract_platform


def _is_not_retryable(error: Exception) -> bool:
    return isinstance(error, InvalidInputError)


class ContentExtractionService:
    """内容提取服务"""

    def __init__(
        self,
        extractors: Mapping[Platform, BaseExtractor],
        retry_attempts: int = 3,
        retry_delay: float = 2.0,
    ):
        self.extractors: Dict[Platform, BaseExtractor] = dict(extractors)
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay

    async def extract_content(self, url: str) -> ExtractionResult:
        """提取单个链接，失败以结果对象返回，不抛异常"""
        platform = extract_platform(url)
        if platform is None:
            logger.warning(f"⚠️ 不支持的平台或无效的URL: {url}")
            return ExtractionResult.fail("不支持的平台或无效的URL", url=url)

        extractor = self.extractors.get(platform)
        if extractor is None:
            return ExtractionResult.fail(f"暂不支持 {platform.value} 平台的内容提取", platform=platform, url=url)

        try:
            content = await retry(
                lambda: extractor.extract(url),
                max_attempts=self.retry_attempts,
                delay=self.retry_delay,
                giveup=_is_not_retryable,
            )
            logger.info(f"✅ 内容提取完成: [{platform.value}] {content.title}")
            return ExtractionResult.ok(content, url=url)
        except Exception as e:
            logger.error(f"❌ 内容提取失败: {url}, {e}")
            return ExtractionResult.fail(f"内容提取失败: {get_error_message(e)}", platform=platform, url=url)

    async def extract_multiple_contents(self, urls: List[str]) -> List[ExtractionResult]:
        """并发提取多个链接，单个失败不影响其它结果，返回顺序与输入一致"""
        logger.info(f"🔍 批量提取 {len(urls)} 个链接")
        outcomes = await asyncio.gather(
            *(self.extract_content(url) for url in urls),
            return_exceptions=True,
        )

        results = []
        for url, outcome in zip(urls, outcomes):
            if isinstance(outcome, BaseException):
                results.append(ExtractionResult.fail(
                    f"URL {url} 提取失败: {get_error_message(outcome)}",
                    platform=extract_platform(url),
                    url=url,
                ))
            else:
                results.append(outcome)

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"📊 批量提取完成: 成功 {succeeded}/{len(urls)}")
        return results

    def get_supported_platforms(self) -> List[Platform]:
        return list(self.extractors.keys())

    def is_platform_supported(self, platform: Optional[Platform]) -> bool:
        return platform in self.extractors

    async def get_platform_status(self) -> Dict[Platform, bool]:
        """并发探测各平台可用性，异常视为不可用"""
        platforms = list(self.extractors.keys())
        outcomes = await asyncio.gather(
            *(self.extractors[p].check_status() for p in platforms),
            return_exceptions=True,
        )
        status = {}
        for platform, outcome in zip(platforms, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"⚠️ 平台 {platform.value} 状态检查异常: {outcome}")
                status[platform] = False
            else:
                status[platform] = bool(outcome)
        return status

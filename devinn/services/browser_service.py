"""
浏览器自动化服务
基于 Playwright 管理共享的无头浏览器实例，提供页面操作工具方法
"""

import asyncio
import random
from typing import List, Optional, Sequence
from loguru import logger
from playwright.async_api import async_playwright, Browser, Page, Playwright, Route

from devinn.core.config import Settings
from devinn.core.exceptions import (
    BrowserNotInitializedError,
    ElementNotFoundError,
    PageLoadError,
    ScreenshotError,
)

LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
]

# 拦截这些资源以加快页面加载
BLOCKED_RESOURCE_TYPES = {"stylesheet", "font", "image"}

ANTI_BOT_SCRIPT = """
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
delete Object.getPrototypeOf(navigator).webdriver;
"""


class BrowserAutomationService:
    """浏览器自动化服务

    initialize() 幂等；所有页面共享同一个浏览器进程，每个页面使用独立的 context。
    """

    def __init__(self, settings: Settings):
        self.headless = settings.BROWSER_HEADLESS
        self.timeout = settings.BROWSER_TIMEOUT
        self.user_agent = settings.BROWSER_USER_AGENT
        self.viewport = {
            'width': settings.BROWSER_VIEWPORT_WIDTH,
            'height': settings.BROWSER_VIEWPORT_HEIGHT,
        }
        self.block_resources = settings.BROWSER_BLOCK_RESOURCES

        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None

    @property
    def is_initialized(self) -> bool:
        return self.browser is not None

    async def initialize(self):
        """启动浏览器"""
        if self.browser:
            return

        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=LAUNCH_ARGS
            )
            logger.info("🌐 浏览器初始化成功")
        except Exception as e:
            logger.error(f"❌ 浏览器初始化失败: {e}")
            await self._stop_playwright()
            raise

    async def create_page(self) -> Page:
        """创建新页面（按需初始化浏览器）"""
        if not self.browser:
            await self.initialize()
        if not self.browser:
            raise BrowserNotInitializedError()

        context = await self.browser.new_context(
            user_agent=self.user_agent,
            viewport=self.viewport,
            locale='zh-CN'
        )
        page = await context.new_page()
        page.set_default_timeout(self.timeout)
        page.set_default_navigation_timeout(self.timeout)

        if self.block_resources:
            await page.route("**/*", self._handle_route)

        return page

    @staticmethod
    async def _handle_route(route: Route):
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    async def navigate_to_page(self, page: Page, url: str):
        """导航到目标页面并等待网络空闲"""
        try:
            await page.goto(url, wait_until='networkidle', timeout=self.timeout)
        except Exception as e:
            logger.error(f"页面导航失败: {url}, {e}")
            raise PageLoadError(url, message="Navigation failed")

    async def wait_for_selector(self, page: Page, selector: str, timeout: Optional[int] = None):
        try:
            await page.wait_for_selector(selector, timeout=timeout or self.timeout)
        except Exception:
            raise ElementNotFoundError(selector, message="Element not found")

    async def wait_for_any_selector(self, page: Page, selectors: Sequence[str], timeout: int) -> bool:
        """任一选择器出现即返回 True，超时返回 False"""
        tasks = [
            asyncio.ensure_future(page.wait_for_selector(selector, timeout=timeout))
            for selector in selectors
        ]
        try:
            for finished in asyncio.as_completed(tasks):
                try:
                    await finished
                    return True
                except Exception:
                    continue
            return False
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # 回收被取消任务的异常
            await asyncio.gather(*tasks, return_exceptions=True)

    async def extract_text(self, page: Page, selector: str) -> Optional[str]:
        try:
            element = await page.query_selector(selector)
            if not element:
                return None
            text = await element.text_content()
            return text.strip() if text else None
        except Exception:
            return None

    async def extract_attribute(self, page: Page, selector: str, attribute: str) -> Optional[str]:
        try:
            element = await page.query_selector(selector)
            if not element:
                return None
            return await element.get_attribute(attribute)
        except Exception:
            return None

    async def extract_multiple_texts(self, page: Page, selector: str) -> List[str]:
        try:
            elements = await page.query_selector_all(selector)
            texts = []
            for element in elements:
                text = await element.text_content()
                if text and text.strip():
                    texts.append(text.strip())
            return texts
        except Exception:
            return []

    async def extract_multiple_attributes(self, page: Page, selector: str, attribute: str) -> List[str]:
        try:
            elements = await page.query_selector_all(selector)
            values = []
            for element in elements:
                value = await element.get_attribute(attribute)
                if value:
                    values.append(value)
            return values
        except Exception:
            return []

    async def scroll_to_bottom(self, page: Page, step: int = 100, interval_ms: int = 100):
        """逐步滚动到页面底部，触发懒加载"""
        await page.evaluate(
            """async ([step, interval]) => {
                await new Promise((resolve) => {
                    let total = 0;
                    const timer = setInterval(() => {
                        window.scrollBy(0, step);
                        total += step;
                        if (total >= document.body.scrollHeight - window.innerHeight) {
                            clearInterval(timer);
                            resolve();
                        }
                    }, interval);
                });
            }""",
            [step, interval_ms]
        )

    async def take_screenshot(self, page: Page, path: Optional[str] = None) -> bytes:
        try:
            return await page.screenshot(path=path, full_page=True)
        except Exception as e:
            raise ScreenshotError(f"截图失败: {e}")

    async def bypass_anti_bot(self, page: Page):
        """简单的反爬处理：随机等待、模拟鼠标、隐藏自动化特征"""
        await asyncio.sleep(random.uniform(1, 3))
        await page.mouse.move(random.randint(0, 100), random.randint(0, 100))
        await page.add_init_script(ANTI_BOT_SCRIPT)

    async def close_page(self, page: Page):
        """关闭页面及其 context，失败只记录日志"""
        try:
            context = page.context
            await page.close()
            await context.close()
        except Exception as e:
            logger.error(f"关闭页面失败: {e}")

    async def close(self):
        """关闭浏览器"""
        try:
            if self.browser:
                await self.browser.close()
                logger.info("浏览器已关闭")
        except Exception as e:
            logger.error(f"关闭浏览器失败: {e}")
        finally:
            self.browser = None
            await self._stop_playwright()

    async def _stop_playwright(self):
        try:
            if self.playwright:
                await self.playwright.stop()
        except Exception as e:
            logger.error(f"停止Playwright失败: {e}")
        finally:
            self.playwright = None

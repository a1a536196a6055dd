"""
马蜂窝游记提取器
"""

from typing import List, Optional
from playwright.async_api import Page

from devinn.schemas.content import (
    ActivityType,
    Author,
    ContentStats,
    ExtractedActivity,
    ExtractedContent,
    ExtractedLocation,
    MediaItem,
    MediaType,
    Platform,
)
from devinn.services.extractors.base import BaseExtractor
from devinn.services.extractors.gazetteer import MAFENGWO_ACTIVITY_PATTERNS, MAFENGWO_LOCATION_PATTERNS, find_all
from devinn.tools.text_utils import extract_chinese_keywords, parse_social_count

SELECTORS = {
    "title": ['.title', '.article-title', '.post-title', 'h1', '.travel-title'],
    "description": ['.summary', '.article-summary', '.post-summary', '.description', '.content p:first-of-type'],
    "content": ['.content', '.article-content', '.post-content'],
    "author": ['.author-name', '.user-name', '.nickname', '.author .name', '.post-author'],
    "avatar": ['.author-avatar img', '.user-avatar img', '.author img', '.post-author img'],
    "like_count": ['.like-count', '.praise-count', '.zan-count'],
    "comment_count": ['.comment-count', '.reply-count'],
    "share_count": ['.share-count', '.forward-count'],
    "images": ['.content img', '.article-content img', '.post-content img', '.photo-list img'],
    "tags": ['.tag', '.tags .item', '.label', '.keyword'],
}

MAX_IMAGES = 10
MAX_LOCATIONS = 8
MAX_ACTIVITIES = 5
MAX_KEYWORDS = 8
MAX_TAGS = 10
# 正文兜底摘要
SUMMARY_MIN_LENGTH = 50
SUMMARY_LENGTH = 200


class MafengwoExtractor(BaseExtractor):
    """马蜂窝提取器"""

    platform = Platform.MAFENGWO
    platform_name = "马蜂窝"
    ready_selectors = ('.title', '.article-title', 'h1')
    ready_timeout = 10000

    async def check_status(self) -> bool:
        return await self.probe_browser()

    async def parse_page(self, page: Page, url: str) -> ExtractedContent:
        title = await self.first_text(page, SELECTORS["title"]) or "马蜂窝游记"
        description = await self.extract_description(page)
        author = await self.first_text(page, SELECTORS["author"]) or "马蜂窝用户"
        avatar = await self.first_attribute(page, SELECTORS["avatar"], ("src",))

        stats = ContentStats(
            likes=parse_social_count(await self.first_text(page, SELECTORS["like_count"])),
            comments=parse_social_count(await self.first_text(page, SELECTORS["comment_count"])),
            shares=parse_social_count(await self.first_text(page, SELECTORS["share_count"])),
        )

        image_urls: List[str] = []
        for selector in SELECTORS["images"]:
            for src in await self.browser.extract_multiple_attributes(page, selector, "src"):
                if src not in image_urls:
                    image_urls.append(src)
        media = [
            MediaItem(type=MediaType.IMAGE, url=src, caption=f"马蜂窝游记图片 {index + 1}")
            for index, src in enumerate(image_urls[:MAX_IMAGES])
        ]

        page_tags: List[str] = []
        for selector in SELECTORS["tags"]:
            page_tags.extend(await self.browser.extract_multiple_texts(page, selector))

        text = f"{title} {description}"
        return ExtractedContent(
            title=title,
            description=description,
            platform=self.platform,
            locations=self.build_locations(find_all(text, MAFENGWO_LOCATION_PATTERNS, MAX_LOCATIONS), with_address=False),
            activities=self.extract_activities(text),
            media=media,
            tags=self.build_tags(page_tags, text),
            author=Author(name=author, avatar=avatar),
            stats=stats,
        )

    async def extract_description(self, page: Page) -> str:
        """优先取摘要，没有则截取正文开头"""
        summary = await self.first_text(page, SELECTORS["description"])
        if summary:
            return summary
        for selector in SELECTORS["content"]:
            text: Optional[str] = await self.browser.extract_text(page, selector)
            if text and len(text) > SUMMARY_MIN_LENGTH:
                return text[:SUMMARY_LENGTH] + "..."
        return ""

    @staticmethod
    def extract_activities(text: str) -> List[ExtractedActivity]:
        return [
            ExtractedActivity(
                name=keyword,
                description=f"马蜂窝游记中推荐的{keyword}体验",
                category="旅行体验",
                estimated_cost=0,
                duration=60,
                tips=["参考马蜂窝游记详情"],
            )
            for keyword in find_all(text, MAFENGWO_ACTIVITY_PATTERNS, MAX_ACTIVITIES)
        ]

    def build_tags(self, page_tags: List[str], text: str) -> List[str]:
        tags = self.clean_tags(page_tags)
        for keyword in extract_chinese_keywords(text, MAX_KEYWORDS):
            if keyword not in tags:
                tags.append(keyword)
        return tags[:MAX_TAGS]

    def get_mock_content(self, url: str = "") -> ExtractedContent:
        return ExtractedContent(
            title="东京5日深度游攻略：从传统到现代的完美体验",
            description="详细的东京5日游攻略，包含交通、住宿、美食、景点推荐，适合第一次去东京的朋友。",
            platform=self.platform,
            locations=[
                ExtractedLocation(name="明治神宫", address="东京都涩谷区代代木神园町1-1",
                                  coordinates=(35.6762, 139.6993), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="上野公园", address="东京都台东区上野公园",
                                  coordinates=(35.7141, 139.7744), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="新宿御苑", address="东京都新宿区内藤町11",
                                  coordinates=(35.6851, 139.7101), type=ActivityType.ATTRACTION),
            ],
            activities=[
                ExtractedActivity(name="明治神宫参拜", description="体验日本神道文化，在都市中心感受宁静",
                                  category="文化体验", estimated_cost=0, duration=90,
                                  tips=["免费参观", "早上人较少", "可以写绘马许愿"]),
                ExtractedActivity(name="上野公园樱花季", description="春季赏樱的绝佳地点，也有多个博物馆",
                                  category="自然风光", estimated_cost=1000, duration=180,
                                  tips=["春季樱花盛开", "有东京国立博物馆", "可以野餐"]),
                ExtractedActivity(name="新宿御苑漫步", description="日式、英式、法式庭园的完美结合",
                                  category="自然风光", estimated_cost=500, duration=120,
                                  tips=["门票500日元", "四季都有不同美景", "禁止饮酒"]),
            ],
            media=[
                MediaItem(type=MediaType.IMAGE, url="https://example.com/mafengwo-image-1.jpg", caption="明治神宫鸟居"),
                MediaItem(type=MediaType.IMAGE, url="https://example.com/mafengwo-image-2.jpg", caption="上野公园樱花"),
                MediaItem(type=MediaType.IMAGE, url="https://example.com/mafengwo-image-3.jpg", caption="新宿御苑日式庭园"),
            ],
            tags=["东京攻略", "深度游", "文化体验", "自然风光", "神社", "公园"],
            author=Author(name="资深旅行家老张", avatar="https://example.com/mafengwo-avatar.jpg"),
            stats=ContentStats(likes=3420, comments=156, shares=289),
        )

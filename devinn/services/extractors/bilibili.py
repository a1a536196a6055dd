"""
B站视频提取器
"""

from typing import List
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
from devinn.services.extractors.gazetteer import BILIBILI_ACTIVITY_KEYWORDS, XHS_LOCATION_PATTERNS, find_all
from devinn.tools.text_utils import parse_count, parse_duration
from devinn.tools.url_utils import is_valid_url

SELECTORS = {
    "title": ['.video-title', '.video-info-title', 'h1[title]', '.video-title-text'],
    "description": ['.video-desc', '.video-info-desc', '.desc-info', '.video-desc-container'],
    "author": ['.up-name', '.username', '.up-info .name', '.video-info-detail .name'],
    "like_count": ['.like', '.video-toolbar .like', '.video-info-detail .like'],
    # 弹幕数作为评论数
    "comment_count": ['.dm', '.danmu', '.video-toolbar .dm'],
    "duration": ['.duration', '.video-time', '.video-info-detail .duration'],
    "tags": ['.tag', '.video-tag', '.tag-panel .tag-item'],
    "thumbnail": ['.video-cover img', '.video-pic img', '.cover img'],
}

TITLE_SUFFIX = "_bilibili_哔哩哔哩"


class BilibiliExtractor(BaseExtractor):
    """B站提取器"""

    platform = Platform.BILIBILI
    platform_name = "B站"
    ready_selectors = (SELECTORS["title"][0], '.video-info', '.video-detail')
    ready_timeout = 15000

    async def parse_page(self, page: Page, url: str) -> ExtractedContent:
        title = await self.first_text(page, SELECTORS["title"])
        if not title:
            title = self.clean_page_title(await page.title())

        description = await self.first_text(page, SELECTORS["description"]) or ""
        author = await self.first_text(page, SELECTORS["author"])
        likes = parse_count(await self.first_text(page, SELECTORS["like_count"]))
        comments = parse_count(await self.first_text(page, SELECTORS["comment_count"]))
        duration = parse_duration(await self.first_text(page, SELECTORS["duration"]))

        tags: List[str] = []
        for selector in SELECTORS["tags"]:
            tags.extend(await self.browser.extract_multiple_texts(page, selector))
        tags = self.clean_tags(tags)

        media = []
        thumbnail = await self.find_thumbnail(page)
        if thumbnail:
            media.append(MediaItem(type=MediaType.IMAGE, url=thumbnail, caption="视频封面"))
        media.append(MediaItem(type=MediaType.VIDEO, url=url, caption=title or "视频内容", timestamp=duration))

        return ExtractedContent(
            title=title or "B站视频内容",
            description=description,
            platform=self.platform,
            locations=self.build_locations(find_all(description, XHS_LOCATION_PATTERNS)),
            activities=self.extract_activities(description, tags),
            media=media,
            tags=tags,
            author=Author(name=author or "未知UP主"),
            stats=ContentStats(likes=likes, comments=comments, shares=0),
        )

    async def find_thumbnail(self, page: Page):
        for selector in SELECTORS["thumbnail"]:
            src = await self.browser.extract_attribute(page, selector, "src")
            if src and is_valid_url(src):
                return src
        return None

    @staticmethod
    def clean_page_title(page_title: str):
        """页面标题兜底：去掉站点后缀，纯站点名视为无标题"""
        if not page_title or "哔哩哔哩" not in page_title:
            return page_title or None
        if page_title.endswith(TITLE_SUFFIX):
            return page_title[: -len(TITLE_SUFFIX)].strip() or None
        return None

    @staticmethod
    def extract_activities(text: str, tags: List[str]) -> List[ExtractedActivity]:
        activities = []
        for keyword in BILIBILI_ACTIVITY_KEYWORDS:
            if keyword in text or any(keyword in tag for tag in tags):
                activities.append(ExtractedActivity(
                    name=f"{keyword}分享",
                    description=f"基于B站视频的{keyword}内容",
                    category=keyword,
                    estimated_cost=0,
                    duration=120,
                    tips=["详情请观看原视频"],
                ))
        return activities

    def get_mock_content(self, url: str = "") -> ExtractedContent:
        return ExtractedContent(
            title="日本旅行VLOG | 东京5日深度游攻略",
            description=(
                "和我一起探索东京的魅力！从浅草寺到新宿，从传统文化到现代都市，这次旅行收获满满。"
                "视频包含详细的交通攻略、美食推荐和景点介绍，希望对计划去日本旅行的朋友有帮助！"
            ),
            platform=self.platform,
            locations=[
                ExtractedLocation(name="浅草寺", address="东京都台东区浅草2-3-1",
                                  coordinates=(35.7148, 139.7967), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="新宿", address="东京都新宿区",
                                  coordinates=(35.6896, 139.7006), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="涩谷十字路口", address="东京都涩谷区道玄坂",
                                  coordinates=(35.6598, 139.7006), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="明治神宫", address="东京都涩谷区代代木神园町1-1",
                                  coordinates=(35.6762, 139.6993), type=ActivityType.ATTRACTION),
            ],
            activities=[
                ExtractedActivity(name="浅草寺参拜体验", description="体验日本传统文化，参拜浅草寺，购买御守",
                                  category="文化体验", estimated_cost=500, duration=120,
                                  tips=["建议早上前往避免人群", "可以体验抽签"]),
                ExtractedActivity(name="新宿购物美食", description="在新宿体验购物和品尝各种日本美食",
                                  category="购物美食", estimated_cost=3000, duration=240,
                                  tips=["推荐去歌舞伎町", "不要错过思い出横丁"]),
                ExtractedActivity(name="涩谷十字路口打卡", description="在世界最繁忙的十字路口感受东京的活力",
                                  category="城市体验", estimated_cost=0, duration=30,
                                  tips=["最佳拍摄点在星巴克二楼", "晚上灯光效果更佳"]),
                ExtractedActivity(name="明治神宫散步", description="在都市中的绿洲感受宁静，了解日本神道文化",
                                  category="自然文化", estimated_cost=0, duration=90,
                                  tips=["免费参观", "周末可能遇到传统婚礼"]),
            ],
            media=[
                MediaItem(type=MediaType.IMAGE, url="https://example.com/bilibili-thumbnail.jpg", caption="视频封面"),
                MediaItem(type=MediaType.VIDEO, url="https://example.com/bilibili-video.mp4",
                          caption="日本旅行VLOG完整版", timestamp=1200),
            ],
            tags=["日本旅行", "东京", "VLOG", "旅行攻略", "美食", "文化体验", "购物"],
            author=Author(name="旅行达人小李", avatar="https://example.com/bilibili-avatar.jpg"),
            stats=ContentStats(likes=8520, comments=342, shares=156),
        )

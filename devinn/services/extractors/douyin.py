"""
抖音短视频提取器
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
from devinn.services.extractors.gazetteer import DOUYIN_ACTIVITY_PATTERNS, DOUYIN_LOCATION_PATTERNS, find_all
from devinn.tools.text_utils import extract_chinese_keywords, parse_social_count

SELECTORS = {
    "title": ['[data-e2e="video-title"]', '.video-info-detail .title', '.video-title', 'h1'],
    "description": ['[data-e2e="video-desc"]', '.video-info-detail .desc', '.video-description', '.content'],
    "author": ['[data-e2e="video-author-name"]', '.author-name', '.user-name', '.nickname'],
    "avatar": ['[data-e2e="video-author-avatar"] img', '.author-avatar img', '.user-avatar img'],
    "like_count": ['[data-e2e="like-count"]', '.like-count', '.digg-count'],
    "comment_count": ['[data-e2e="comment-count"]', '.comment-count'],
    "share_count": ['[data-e2e="share-count"]', '.share-count'],
    "location": ['[data-e2e="video-location"]', '.location-info', '.poi-info'],
    "tags": ['[data-e2e="video-tag"]', '.hashtag', '.topic-tag'],
}

MAX_LOCATIONS = 5
MAX_ACTIVITIES = 3
MAX_KEYWORDS = 5
MAX_TAGS = 10


class DouyinExtractor(BaseExtractor):
    """抖音提取器"""

    platform = Platform.DOUYIN
    platform_name = "抖音"
    ready_selectors = (SELECTORS["title"][0],)
    ready_timeout = 10000

    async def check_status(self) -> bool:
        return await self.probe_browser()

    async def parse_page(self, page: Page, url: str) -> ExtractedContent:
        title = await self.first_text(page, SELECTORS["title"]) or "抖音视频内容"
        description = await self.first_text(page, SELECTORS["description"]) or ""
        author = await self.first_text(page, SELECTORS["author"]) or "抖音用户"
        avatar = await self.first_attribute(page, SELECTORS["avatar"], ("src",))

        stats = ContentStats(
            likes=parse_social_count(await self.first_text(page, SELECTORS["like_count"])),
            comments=parse_social_count(await self.first_text(page, SELECTORS["comment_count"])),
            shares=parse_social_count(await self.first_text(page, SELECTORS["share_count"])),
        )

        location_info = await self.first_text(page, SELECTORS["location"]) or ""
        location_names = find_all(f"{description} {location_info}", DOUYIN_LOCATION_PATTERNS, MAX_LOCATIONS)

        hashtags = []
        for selector in SELECTORS["tags"]:
            hashtags.extend(await self.browser.extract_multiple_texts(page, selector))

        return ExtractedContent(
            title=title,
            description=description,
            platform=self.platform,
            locations=self.build_locations(location_names, with_address=False),
            activities=self.extract_activities(description),
            media=await self.extract_media(page),
            tags=self.build_tags(hashtags, f"{title} {description}"),
            author=Author(name=author, avatar=avatar),
            stats=stats,
        )

    async def extract_media(self, page: Page) -> List[MediaItem]:
        media = []
        video_url = await self.first_attribute(page, ["video"], ("src", "poster"))
        if video_url:
            media.append(MediaItem(type=MediaType.VIDEO, url=video_url, caption="抖音短视频"))

        cover_url = (
            await self.browser.extract_attribute(page, "video[poster]", "poster")
            or await self.first_attribute(page, ['.video-cover img', '.video-poster img'], ("src",))
        )
        if cover_url and cover_url != video_url:
            media.append(MediaItem(type=MediaType.IMAGE, url=cover_url, caption="视频封面"))
        return media

    @staticmethod
    def extract_activities(text: str) -> List[ExtractedActivity]:
        return [
            ExtractedActivity(
                name=keyword,
                description=f"在抖音视频中展示的{keyword}活动",
                category="娱乐体验",
                estimated_cost=0,
                duration=30,
                tips=["参考抖音视频内容"],
            )
            for keyword in find_all(text, DOUYIN_ACTIVITY_PATTERNS, MAX_ACTIVITIES)
        ]

    def build_tags(self, hashtags: List[str], text: str) -> List[str]:
        tags = self.clean_tags(hashtags)
        for keyword in extract_chinese_keywords(text, MAX_KEYWORDS):
            if keyword not in tags:
                tags.append(keyword)
        return tags[:MAX_TAGS]

    def get_mock_content(self, url: str = "") -> ExtractedContent:
        return ExtractedContent(
            title="东京网红打卡地合集！这些地方必须去！",
            description="整理了东京最火的网红打卡地，每一个都超出片！快来收藏吧～",
            platform=self.platform,
            locations=[
                ExtractedLocation(name="涩谷天空", address="东京都涩谷区涩谷2-24-12",
                                  coordinates=(35.6580, 139.7016), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="六本木Hills", address="东京都港区六本木6-10-1",
                                  coordinates=(35.6606, 139.7298), type=ActivityType.ATTRACTION),
            ],
            activities=[
                ExtractedActivity(name="涩谷天空观景", description="360度俯瞰涩谷十字路口的绝佳位置",
                                  category="观光游览", estimated_cost=2000, duration=60,
                                  tips=["建议傍晚时分前往", "需要提前预约"]),
            ],
            media=[
                MediaItem(type=MediaType.VIDEO, url="https://example.com/douyin-video.mp4", caption="东京网红打卡地"),
            ],
            tags=["东京", "网红打卡", "涩谷", "六本木"],
            author=Author(name="旅行博主小李", avatar="https://example.com/douyin-avatar.jpg"),
            stats=ContentStats(likes=15600, comments=234, shares=892),
        )

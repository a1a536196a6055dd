"""
小红书笔记提取器
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
from devinn.services.extractors.gazetteer import XHS_ACTIVITY_KEYWORDS, XHS_LOCATION_PATTERNS, find_all
from devinn.tools.text_utils import parse_count
from devinn.tools.url_utils import is_valid_url

# 每个字段按顺序尝试的选择器
SELECTORS = {
    "title": ['.note-item .title', '.note-detail .title', '[data-testid="note-title"]', '.note-scroller .title'],
    "description": ['.note-item .desc', '.note-detail .desc', '.note-content .text', '.note-scroller .content'],
    "images": ['.note-item .cover img', '.note-detail .cover img', '.carousel-container img', '.note-scroller img'],
    "tags": ['.note-item .tag', '.note-detail .tag', '.tag-list .tag', '.note-scroller .tag'],
    "author": ['.note-item .author .name', '.note-detail .author .name', '.user-info .name', '.note-scroller .author'],
    "like_count": ['.note-item .like-count', '.note-detail .like-count', '.engagement .like', '.note-scroller .like'],
    "comment_count": ['.note-item .comment-count', '.note-detail .comment-count', '.engagement .comment', '.note-scroller .comment'],
}


class XiaohongshuExtractor(BaseExtractor):
    """小红书提取器"""

    platform = Platform.XIAOHONGSHU
    platform_name = "小红书"
    ready_selectors = (SELECTORS["title"][0], '.note-item', '.note-detail', '.note-scroller')
    ready_timeout = 10000

    async def parse_page(self, page: Page, url: str) -> ExtractedContent:
        title = await self.first_text(page, SELECTORS["title"])
        if not title:
            page_title = await page.title()
            if page_title and "小红书" not in page_title:
                title = page_title.strip()

        description = await self.first_text(page, SELECTORS["description"]) or ""
        tags = self.clean_tags(await self.all_texts(page, SELECTORS["tags"]))
        author = await self.first_text(page, SELECTORS["author"])
        likes = parse_count(await self.first_text(page, SELECTORS["like_count"]))
        comments = parse_count(await self.first_text(page, SELECTORS["comment_count"]))

        image_urls = await self.all_attributes(page, SELECTORS["images"], ("src", "data-src", "data-original"))
        media = [
            MediaItem(type=MediaType.IMAGE, url=image_url, caption=f"图片 {index + 1}")
            for index, image_url in enumerate(u for u in image_urls if is_valid_url(u))
        ]

        text = f"{title or ''} {description}"
        return ExtractedContent(
            title=title or "小红书内容",
            description=description,
            platform=self.platform,
            locations=self.extract_locations(text),
            activities=self.extract_activities(text, tags),
            media=media,
            tags=tags,
            author=Author(name=author or "未知用户"),
            stats=ContentStats(likes=likes, comments=comments, shares=0),
        )

    def extract_locations(self, text: str) -> List[ExtractedLocation]:
        return self.build_locations(find_all(text, XHS_LOCATION_PATTERNS))

    @staticmethod
    def extract_activities(text: str, tags: List[str]) -> List[ExtractedActivity]:
        activities = []
        for keyword in XHS_ACTIVITY_KEYWORDS:
            if keyword in text or any(keyword in tag for tag in tags):
                activities.append(ExtractedActivity(
                    name=f"{keyword}体验",
                    description=f"基于小红书内容的{keyword}推荐",
                    category=keyword,
                    estimated_cost=0,
                    duration=120,
                    tips=["详情请查看原始内容"],
                ))
        return activities

    def get_mock_content(self, url: str = "") -> ExtractedContent:
        return ExtractedContent(
            title="东京美食探店攻略",
            description="分享我在东京发现的几家超棒的美食店，包括拉面、寿司和甜品店，每一家都值得专程去品尝！",
            platform=self.platform,
            locations=[
                ExtractedLocation(name="一兰拉面 新宿店", address="东京都新宿区新宿3-34-11",
                                  coordinates=(35.6895, 139.7006), type=ActivityType.RESTAURANT),
                ExtractedLocation(name="筑地市场", address="东京都中央区筑地5-2-1",
                                  coordinates=(35.6654, 139.7707), type=ActivityType.ATTRACTION),
                ExtractedLocation(name="Bills 表参道店", address="东京都涩谷区神宫前4-30-3",
                                  coordinates=(35.6681, 139.7109), type=ActivityType.RESTAURANT),
            ],
            activities=[
                ExtractedActivity(name="品尝正宗豚骨拉面", description="一兰拉面的经典豚骨拉面，汤头浓郁，面条Q弹",
                                  category="美食体验", estimated_cost=1200, duration=60,
                                  tips=["建议避开用餐高峰期", "可以自定义面条硬度和汤头浓度"]),
                ExtractedActivity(name="筑地市场海鲜丼", description="新鲜的海鲜丼，食材都是当天采购的最新鲜海产",
                                  category="美食体验", estimated_cost=2500, duration=90,
                                  tips=["早上6点开始营业", "建议早点去避免排队"]),
                ExtractedActivity(name="Bills松饼下午茶", description="世界最好吃的松饼，配上新鲜水果和蜂蜜黄油",
                                  category="美食体验", estimated_cost=1800, duration=120,
                                  tips=["需要提前预约", "推荐经典ricotta松饼"]),
            ],
            media=[
                MediaItem(type=MediaType.IMAGE, url="https://example.com/xhs-image-1.jpg", caption="一兰拉面店内环境"),
                MediaItem(type=MediaType.IMAGE, url="https://example.com/xhs-image-2.jpg", caption="筑地市场新鲜海鲜丼"),
                MediaItem(type=MediaType.IMAGE, url="https://example.com/xhs-image-3.jpg", caption="Bills松饼"),
            ],
            tags=["东京美食", "拉面", "海鲜丼", "松饼", "日本旅行", "美食探店"],
            author=Author(name="旅行美食家小王", avatar="https://example.com/avatar.jpg"),
            stats=ContentStats(likes=1250, comments=89, shares=156),
        )

"""平台提取器单元测试

浏览器服务用 Mock 替代，不启动真实浏览器。
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from devinn.core.exceptions import ExtractionError, InvalidURLError, PageLoadError
from devinn.schemas.content import MediaType, Platform
from devinn.services.extractors import (
    BilibiliExtractor,
    DouyinExtractor,
    ExtractionPolicy,
    MafengwoExtractor,
    XiaohongshuExtractor,
)

REAL = ExtractionPolicy(real_extraction=True)
REAL_PROPAGATE = ExtractionPolicy(real_extraction=True, on_failure="propagate")

URLS = {
    XiaohongshuExtractor: "https://www.xiaohongshu.com/explore/abc",
    BilibiliExtractor: "https://www.bilibili.com/video/BV1xx",
    DouyinExtractor: "https://www.douyin.com/video/123",
    MafengwoExtractor: "https://www.mafengwo.cn/i/123.html",
}


def make_browser(page, texts=None, multi_texts=None, multi_attributes=None, attributes=None):
    """按选择器返回预设文本的浏览器服务"""
    texts = texts or {}
    attributes = attributes or {}
    multi_texts = multi_texts or {}
    multi_attributes = multi_attributes or {}

    browser = MagicMock()
    browser.create_page = AsyncMock(return_value=page)
    browser.bypass_anti_bot = AsyncMock()
    browser.navigate_to_page = AsyncMock()
    browser.wait_for_any_selector = AsyncMock(return_value=True)
    browser.close_page = AsyncMock()
    browser.extract_text = AsyncMock(side_effect=lambda _page, selector: texts.get(selector))
    browser.extract_attribute = AsyncMock(
        side_effect=lambda _page, selector, attribute: attributes.get((selector, attribute))
    )
    browser.extract_multiple_texts = AsyncMock(side_effect=lambda _page, selector: multi_texts.get(selector, []))
    browser.extract_multiple_attributes = AsyncMock(
        side_effect=lambda _page, selector, attribute: multi_attributes.get((selector, attribute), [])
    )
    return browser


class TestExtractionPolicy:
    """抓取策略测试"""

    def test_unknown_failure_mode(self):
        with pytest.raises(ValueError):
            ExtractionPolicy(on_failure="ignore")

    def test_from_settings(self, test_settings):
        policy = ExtractionPolicy.from_settings(test_settings)
        assert policy.real_extraction is False
        assert policy.on_failure == "mock"

    def test_production_enables_real_extraction(self, test_settings):
        settings = test_settings.model_copy(update={"APP_ENV": "production"})
        assert ExtractionPolicy.from_settings(settings).real_extraction is True


class TestMockExtraction:
    """未开启真实抓取时返回示例数据"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("extractor_cls", list(URLS))
    async def test_mock_content(self, extractor_cls, mock_page):
        browser = make_browser(mock_page)
        extractor = extractor_cls(browser)

        content = await extractor.extract(URLS[extractor_cls])

        assert content.platform == extractor_cls.platform
        assert content.title
        assert content.stats.likes >= 0
        browser.create_page.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_url(self, mock_page):
        extractor = XiaohongshuExtractor(make_browser(mock_page))
        with pytest.raises(InvalidURLError):
            await extractor.extract("not a url")


class TestXiaohongshuExtractor:
    """小红书页面解析测试"""

    @pytest.mark.asyncio
    async def test_parse_page(self, mock_page):
        browser = make_browser(
            mock_page,
            texts={
                '.note-item .title': '成都三日游',
                '.note-item .desc': '在成都吃火锅，去宽窄巷子品尝美食',
                '.note-item .author .name': '小李',
                '.note-item .like-count': '1.2万',
                '.note-item .comment-count': '300',
            },
            multi_texts={'.note-item .tag': ['#成都', '#美食', '#成都']},
            multi_attributes={('.note-item .cover img', 'src'): ['https://img.example.com/1.jpg', 'data:image']},
        )
        extractor = XiaohongshuExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[XiaohongshuExtractor])

        assert content.title == "成都三日游"
        assert content.platform == Platform.XIAOHONGSHU
        assert content.tags == ("成都", "美食")
        assert [loc.name for loc in content.locations] == ["成都"]
        assert [act.name for act in content.activities] == ["美食体验", "品尝体验"]
        assert content.stats.likes == 12000
        assert content.stats.comments == 300
        assert content.author.name == "小李"
        assert len(content.media) == 1
        assert content.media[0].type == MediaType.IMAGE
        browser.navigate_to_page.assert_awaited_once_with(mock_page, URLS[XiaohongshuExtractor])
        browser.close_page.assert_awaited_once_with(mock_page)

    @pytest.mark.asyncio
    async def test_title_falls_back_to_page_title(self, mock_page):
        mock_page.title = AsyncMock(return_value="西湖一日游")
        browser = make_browser(mock_page)
        extractor = XiaohongshuExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[XiaohongshuExtractor])

        assert content.title == "西湖一日游"
        assert content.author.name == "未知用户"

    @pytest.mark.asyncio
    async def test_wait_timeout_still_parses(self, mock_page):
        browser = make_browser(mock_page, texts={'.note-item .title': '标题'})
        browser.wait_for_any_selector = AsyncMock(return_value=False)
        extractor = XiaohongshuExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[XiaohongshuExtractor])
        assert content.title == "标题"


class TestDouyinExtractor:
    """抖音页面解析测试"""

    @pytest.mark.asyncio
    async def test_parse_counts_and_tags(self, mock_page):
        browser = make_browser(
            mock_page,
            texts={
                '[data-e2e="video-title"]': '三亚旅行',
                '[data-e2e="video-desc"]': '三亚海滩打卡，品尝海鲜',
                '[data-e2e="like-count"]': '1.5k',
                '[data-e2e="comment-count"]': '2.1万',
            },
            multi_texts={'.hashtag': ['#三亚']},
        )
        extractor = DouyinExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[DouyinExtractor])

        assert content.stats.likes == 1500
        assert content.stats.comments == 21000
        assert content.stats.shares == 0
        assert content.tags[0] == "三亚"
        assert "三亚" in [loc.name for loc in content.locations]
        assert "打卡" in [act.name for act in content.activities]


class TestBilibiliExtractor:
    """B站页面解析测试"""

    @pytest.mark.asyncio
    async def test_parse_page(self, mock_page):
        mock_page.title = AsyncMock(return_value="成都美食vlog_bilibili_哔哩哔哩")
        browser = make_browser(
            mock_page,
            texts={
                '.video-desc': '在成都品尝美食',
                '.like': '1.2万',
                '.dm': '3456',
                '.duration': '01:02:03',
            },
            multi_texts={'.tag': ['#旅行', '旅行']},
            attributes={('.video-cover img', 'src'): 'https://i0.hdslb.com/cover.jpg'},
        )
        extractor = BilibiliExtractor(browser, REAL, settle_delay=0)
        url = URLS[BilibiliExtractor]

        content = await extractor.extract(url)

        assert content.title == "成都美食vlog"
        assert content.platform == Platform.BILIBILI
        assert content.stats.likes == 12000
        # 弹幕数记为评论数
        assert content.stats.comments == 3456
        assert content.stats.shares == 0
        assert content.author.name == "未知UP主"
        assert content.tags == ("旅行",)
        assert [loc.name for loc in content.locations] == ["成都"]
        assert [act.name for act in content.activities] == ["旅行分享", "美食分享", "品尝分享"]

        cover, video = content.media
        assert (cover.type, cover.url) == (MediaType.IMAGE, 'https://i0.hdslb.com/cover.jpg')
        assert (video.type, video.url) == (MediaType.VIDEO, url)
        assert video.timestamp == 3723
        assert video.caption == "成都美食vlog"

    @pytest.mark.asyncio
    async def test_without_thumbnail_or_title(self, mock_page):
        mock_page.title = AsyncMock(return_value="哔哩哔哩 (゜-゜)つロ 干杯~-bilibili")
        extractor = BilibiliExtractor(make_browser(mock_page), REAL, settle_delay=0)

        content = await extractor.extract(URLS[BilibiliExtractor])

        assert content.title == "B站视频内容"
        assert [item.type for item in content.media] == [MediaType.VIDEO]
        assert content.media[0].timestamp is None

    @pytest.mark.parametrize("page_title, expected", [
        ("京都红叶_bilibili_哔哩哔哩", "京都红叶"),
        ("_bilibili_哔哩哔哩", None),
        ("哔哩哔哩 (゜-゜)つロ 干杯~-bilibili", None),
        ("普通标题", "普通标题"),
        ("", None),
    ])
    def test_clean_page_title(self, page_title, expected):
        assert BilibiliExtractor.clean_page_title(page_title) == expected


class TestMafengwoExtractor:
    """马蜂窝页面解析测试"""

    BODY = "第一天去了台北，晚上在夜市品尝美食。" + "沿着淡水河边慢慢走，" * 20

    @pytest.mark.asyncio
    async def test_parse_page(self, mock_page):
        images = [f"https://img.mafengwo.net/{i}.jpeg" for i in range(12)]
        browser = make_browser(
            mock_page,
            texts={
                '.title': '台湾环岛游记',
                '.content': self.BODY,
                '.author-name': '老王',
                '.like-count': '2.5k',
                '.comment-count': '1.1万',
            },
            multi_texts={'.tag': ['#台湾']},
            multi_attributes={
                ('.content img', 'src'): images,
                ('.photo-list img', 'src'): images[:2],
            },
            attributes={('.author-avatar img', 'src'): 'https://img.mafengwo.net/avatar.jpeg'},
        )
        extractor = MafengwoExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[MafengwoExtractor])

        assert content.title == "台湾环岛游记"
        # 没有摘要时截取正文开头
        assert content.description == self.BODY[:200] + "..."
        assert content.stats.likes == 2500
        assert content.stats.comments == 11000
        assert content.author.name == "老王"
        assert content.author.avatar == 'https://img.mafengwo.net/avatar.jpeg'
        assert [item.url for item in content.media] == images[:10]
        assert content.media[0].caption == "马蜂窝游记图片 1"
        assert "台北" in [loc.name for loc in content.locations]
        assert all(act.category == "旅行体验" for act in content.activities)
        assert len(content.activities) <= 5
        assert content.tags[0] == "台湾"
        assert len(content.tags) <= 10

    @pytest.mark.asyncio
    async def test_short_body_has_no_description(self, mock_page):
        browser = make_browser(mock_page, texts={'.title': '随笔', '.content': '太短了'})
        extractor = MafengwoExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[MafengwoExtractor])

        assert content.description == ""
        assert content.author.name == "马蜂窝用户"

    @pytest.mark.asyncio
    async def test_summary_preferred_over_body(self, mock_page):
        browser = make_browser(mock_page, texts={'.summary': '一句话摘要', '.content': self.BODY})
        extractor = MafengwoExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[MafengwoExtractor])
        assert content.description == "一句话摘要"

    @pytest.mark.asyncio
    async def test_location_limit(self, mock_page):
        browser = make_browser(mock_page, texts={'.title': '北京上海广州深圳杭州成都重庆西安南京武汉'})
        extractor = MafengwoExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[MafengwoExtractor])

        assert [loc.name for loc in content.locations] == ["北京", "上海", "广州", "深圳", "杭州", "成都", "重庆", "西安"]
        assert all(loc.address == "" for loc in content.locations)


class TestFailureHandling:
    """抓取失败处理测试"""

    @pytest.mark.asyncio
    async def test_mock_policy_returns_sample(self, mock_page):
        browser = make_browser(mock_page)
        browser.navigate_to_page = AsyncMock(side_effect=PageLoadError(URLS[BilibiliExtractor]))
        extractor = BilibiliExtractor(browser, REAL, settle_delay=0)

        content = await extractor.extract(URLS[BilibiliExtractor])

        assert content == extractor.get_mock_content()
        browser.close_page.assert_awaited_once_with(mock_page)

    @pytest.mark.asyncio
    async def test_propagate_policy_raises(self, mock_page):
        browser = make_browser(mock_page)
        browser.create_page = AsyncMock(side_effect=RuntimeError("浏览器崩溃"))
        extractor = MafengwoExtractor(browser, REAL_PROPAGATE, settle_delay=0)

        with pytest.raises(ExtractionError) as exc_info:
            await extractor.extract(URLS[MafengwoExtractor])

        assert exc_info.value.platform == "MAFENGWO"
        browser.close_page.assert_not_awaited()


class TestCheckStatus:
    """平台可用性探测测试"""

    @pytest.mark.asyncio
    async def test_status_without_real_extraction(self, mock_page):
        assert await DouyinExtractor(make_browser(mock_page)).check_status() is True

    @pytest.mark.asyncio
    async def test_status_when_page_creation_fails(self, mock_page):
        browser = make_browser(mock_page)
        browser.create_page = AsyncMock(side_effect=RuntimeError("无法启动"))
        assert await MafengwoExtractor(browser, REAL).check_status() is False

    @pytest.mark.asyncio
    async def test_status_opens_and_closes_page(self, mock_page):
        browser = make_browser(mock_page)
        assert await DouyinExtractor(browser, REAL).check_status() is True
        browser.close_page.assert_awaited_once_with(mock_page)

"""
地名/活动关键词规则

各平台从正文中识别地点和活动时使用的正则表达式。
"""

import re
from typing import Iterable, List, Pattern

CHINA_CITIES = (
    "北京|上海|广州|深圳|杭州|成都|重庆|西安|南京|武汉|天津|青岛|大连|厦门|苏州|无锡|宁波|"
    "长沙|郑州|沈阳|哈尔滨|长春|石家庄|太原|合肥|南昌|福州|贵阳|昆明|兰州|银川|西宁|"
    "乌鲁木齐|拉萨|呼和浩特|南宁|海口|三亚"
)
JAPAN_CITIES = "东京|大阪|京都|名古屋|横滨|神户|奈良|札幌|福冈|仙台"
KOREA_CITIES = "首尔|釜山|济州岛|仁川|大邱|光州|大田|蔚山"
US_CITIES = "纽约|洛杉矶|旧金山|芝加哥|华盛顿|波士顿|西雅图|拉斯维加斯|迈阿密|奥兰多"
EUROPE_CITIES = "伦敦|巴黎|罗马|米兰|巴塞罗那|马德里|阿姆斯特丹|柏林|慕尼黑|维也纳|布拉格|苏黎世"

# 后缀型规则只取后缀前 1~3 个汉字
_CJK = "[一-龥]"

XHS_LOCATION_PATTERNS = [
    re.compile(rf"(?:{CHINA_CITIES})[市区县]?"),
    re.compile(JAPAN_CITIES),
    re.compile(KOREA_CITIES),
    re.compile(US_CITIES),
    re.compile(EUROPE_CITIES),
]

DOUYIN_LOCATION_PATTERNS = [
    re.compile(rf"(?:{CHINA_CITIES})"),
    re.compile(rf"{_CJK}{{1,3}}[市县区]"),
    re.compile(rf"{_CJK}{{1,3}}[山湖海岛]"),
    re.compile("东京|大阪|京都|首尔|曼谷|新加坡|巴黎|伦敦|纽约"),
]

MAFENGWO_LOCATION_PATTERNS = DOUYIN_LOCATION_PATTERNS[:3] + [
    re.compile("东京|大阪|京都|首尔|曼谷|新加坡|巴黎|伦敦|纽约|台北|香港|澳门"),
    re.compile(rf"{_CJK}{{1,3}}(?:寺|庙|神社|教堂)"),
    re.compile(rf"{_CJK}{{1,3}}(?:公园|广场)"),
]

XHS_ACTIVITY_KEYWORDS = ["美食", "景点", "购物", "体验", "游玩", "参观", "品尝", "探店"]
BILIBILI_ACTIVITY_KEYWORDS = ["旅行", "美食", "景点", "购物", "体验", "游玩", "参观", "品尝", "探店", "vlog", "攻略"]

DOUYIN_ACTIVITY_PATTERNS = [
    re.compile("打卡|拍照|游览|体验|品尝|购物|观光"),
    re.compile("美食|景点|博物馆|公园|寺庙|神社"),
    re.compile("温泉|滑雪|登山|海滩|潜水"),
]

MAFENGWO_ACTIVITY_PATTERNS = [
    re.compile("打卡|拍照|游览|体验|品尝|购物|观光|参观|漫步"),
    re.compile("美食|景点|博物馆|公园|寺庙|神社|教堂|古迹"),
    re.compile("温泉|滑雪|登山|海滩|潜水|徒步|骑行"),
    re.compile("购物|美食|文化|历史|自然|艺术"),
]


def find_all(text: str, patterns: Iterable[Pattern], limit: int = None) -> List[str]:
    """按规则顺序收集匹配项，去重并保持首次出现的顺序"""
    found: List[str] = []
    for pattern in patterns:
        for match in pattern.findall(text or ""):
            if match and match not in found:
                found.append(match)
    return found[:limit] if limit is not None else found

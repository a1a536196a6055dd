"""
AI 提示模板
统一管理所有 Gemini 调用使用的提示词
"""

import json
from typing import Any, List, Optional, Sequence

from devinn.schemas.content import ExtractedContent
from devinn.schemas.travel_plan import ChatMessage, TravelPlan, UserRequirements

# 聊天时保留的历史消息条数
CHAT_HISTORY_LIMIT = 5

JSON_ONLY = "**重要**: 只返回JSON格式的结果，不要包含其他文字说明。"


def _dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def _join(values: Optional[Sequence[str]], default: str) -> str:
    return ", ".join(values) if values else default


class PromptTemplates:
    """提示模板集合，全部为静态方法"""

    @staticmethod
    def summarize_contents(contents: Sequence[ExtractedContent]) -> List[dict]:
        """内容摘要，供规划提示使用"""
        return [
            {
                "platform": content.platform.value,
                "title": content.title,
                "description": content.description,
                "locations": [
                    {"name": l.name, "type": l.type.value, "coordinates": l.coordinates}
                    for l in content.locations
                ],
                "activities": [
                    {
                        "name": a.name,
                        "category": a.category,
                        "cost": a.estimated_cost,
                        "duration": a.duration,
                        "tips": list(a.tips),
                    }
                    for a in content.activities
                ],
                "tags": list(content.tags),
                "stats": content.stats.model_dump(),
            }
            for content in contents
        ]

    @staticmethod
    def build_travel_plan_prompt(contents: Sequence[ExtractedContent], requirements: UserRequirements) -> str:
        """旅行计划生成提示"""
        budget = f"{requirements.budget:g}元" if requirements.budget else "预算灵活"
        return f"""你是一个专业的AI旅行规划师，具有丰富的全球旅行经验和深度的文化理解。请根据以下信息生成一个详细、实用、个性化的旅行计划。

## 用户需求分析
- **旅行天数**: {requirements.duration}天
- **旅行人数**: {requirements.travelers}人
- **预算范围**: {budget}
- **旅行风格**: {_join(requirements.travel_style, '未指定')}
- **兴趣偏好**: {_join(requirements.interests, '未指定')}
- **饮食限制**: {_join(requirements.dietary_restrictions, '无特殊要求')}
- **无障碍需求**: {_join(requirements.accessibility, '无特殊需求')}
- **其他要求**: {requirements.free_text or '无'}

## 参考内容数据
{_dumps(PromptTemplates.summarize_contents(contents))}

## 输出要求
请生成一个JSON格式的旅行计划，严格按照以下结构：

```json
{{
  "title": "吸引人的旅行计划标题",
  "destination": "主要目的地",
  "totalDays": {requirements.duration},
  "estimatedBudget": {{
    "min": 最低预算估算,
    "max": 最高预算估算,
    "breakdown": {{"accommodation": 住宿费用, "food": 餐饮费用, "activities": 活动费用, "transport": 交通费用}}
  }},
  "days": [
    {{
      "dayNumber": 1,
      "date": "YYYY-MM-DD",
      "title": "第一天主题",
      "theme": "当日主题描述",
      "weather": {{"temperature": {{"min": 最低温度, "max": 最高温度}}, "condition": "天气状况", "humidity": 湿度百分比, "precipitation": 降水概率, "windSpeed": 风速}},
      "activities": [
        {{
          "order": 1,
          "startTime": "09:00",
          "endTime": "11:00",
          "type": "ATTRACTION|RESTAURANT|HOTEL|TRANSPORT|ACTIVITY",
          "title": "活动标题",
          "description": "详细描述，包含亮点和注意事项",
          "location": {{
            "name": "地点名称",
            "address": "详细地址",
            "coordinates": [纬度, 经度],
            "district": "所在区域",
            "nearbyLandmarks": [{{"name": "附近地标", "distance": 距离(米), "walkingTime": 步行时间(分钟)}}]
          }},
          "estimatedCost": 预估费用,
          "tips": ["实用建议1", "实用建议2"],
          "bookingInfo": {{"url": "预订链接(如适用)", "provider": "预订平台", "price": 价格, "availability": "可用性说明"}}
        }}
      ],
      "dailySummary": {{"totalCost": 当日总费用, "walkingDistance": 步行距离(公里), "highlights": ["当日亮点1", "当日亮点2"]}}
    }}
  ]
}}
```

## 规划原则
1. **时间合理性**: 确保每天的行程安排合理，考虑交通时间、游览时长和休息时间
2. **地理优化**: 根据地理位置优化路线，减少不必要的往返
3. **个性化匹配**: 根据用户偏好和兴趣选择合适的景点和活动
4. **预算控制**: 提供符合预算范围的建议，包含性价比分析
5. **实用性**: 提供具体的实用建议、注意事项和预订信息
6. **文化敏感**: 考虑当地文化特色和最佳游览时间

## 特别注意
- 所有时间使用24小时制
- 坐标使用WGS84格式 [纬度, 经度]
- 价格以人民币为单位
- 确保JSON格式完全正确，可以被解析
- 只返回JSON内容，不要包含任何其他文字说明"""

    @staticmethod
    def build_adjustment_prompt(plan: TravelPlan, instruction: str) -> str:
        """旅行计划调整提示"""
        plan_json = plan.model_dump(by_alias=True, mode="json", exclude={"flights", "hotels"})
        return f"""你是一个专业的AI旅行规划师。用户希望调整现有的旅行计划，请根据用户指令进行智能调整。

## 当前旅行计划
{_dumps(plan_json)}

## 用户调整指令
"{instruction}"

## 调整要求
1. **保持整体合理性**: 确保调整后的计划在时间、地理位置、预算等方面仍然合理
2. **最小化影响**: 尽量减少对其他未涉及部分的影响
3. **重新计算**: 调整相关的时间、费用、距离等数据
4. **保持结构**: 维持原有的JSON结构格式

## 输出格式
请返回调整后的完整旅行计划JSON，保持与原计划相同的数据结构。

{JSON_ONLY}"""

    @staticmethod
    def build_command_parsing_prompt(command: str, plan: TravelPlan) -> str:
        """自然语言指令解析提示"""
        activity_lines = [
            f"- 第{day.day_number}天 #{activity.order} {activity.title} ({activity.id})"
            for day in plan.days
            for activity in day.activities
        ]
        return f"""你是一个智能的旅行计划助手。请解析用户的自然语言指令，并生成详细的执行计划。

## 用户指令
"{command}"

## 当前旅行计划上下文
目的地: {plan.destination}
总天数: {plan.total_days}天
当前活动总数: {plan.activity_count}个
{chr(10).join(activity_lines)}

## 解析要求
请分析用户指令的意图，并返回以下JSON格式的解析结果：

```json
{{
  "userInput": {json.dumps(command, ensure_ascii=False)},
  "parsedIntent": {{
    "action": "MOVE|REPLACE|ADD|REMOVE|OPTIMIZE|QUERY",
    "target": "目标对象的详细描述",
    "parameters": {{"sourceDay": 源天数, "targetDay": 目标天数, "activityId": "活动ID", "timeSlot": "时间段"}},
    "scope": "SINGLE|DAY|TRIP"
  }},
  "executionPlan": {{
    "steps": [{{"description": "执行步骤", "type": "MODIFY|QUERY|CALCULATE", "estimatedTime": 预估秒数}}],
    "affectedItems": ["受影响的活动ID"],
    "estimatedImpact": "LOW|MEDIUM|HIGH"
  }},
  "confirmation": {{"required": true, "message": "需要用户确认的信息", "risks": ["潜在风险"]}}
}}
```

## 解析指南
1. **动作识别**: 准确识别用户想要执行的操作类型
2. **目标定位**: 明确指令针对的具体对象或范围
3. **参数提取**: 提取指令中的关键参数和约束条件
4. **影响评估**: 评估操作对整个计划的影响程度

{JSON_ONLY}"""

    @staticmethod
    def build_chat_prompt(
        message: str,
        chat_history: Sequence[ChatMessage],
        plan: Optional[TravelPlan] = None,
    ) -> str:
        """AI助手对话提示，只带最近几条历史"""
        history_text = "\n".join(
            f"{'用户' if msg.type == 'USER' else 'AI助手'}：{msg.content}"
            for msg in list(chat_history)[-CHAT_HISTORY_LIMIT:]
        ) or "（无）"

        context_text = ""
        if plan is not None:
            budget = plan.estimated_budget
            context_text = (
                "\n\n## 当前旅行计划上下文\n"
                f"- 计划标题：{plan.title}\n"
                f"- 目的地：{plan.destination}\n"
                f"- 总天数：{plan.total_days}天\n"
                f"- 预算范围：{budget.min:g}-{budget.max:g}元"
            )

        return f"""你是AI笔记DevInn的智能旅行助手，具有专业的旅行规划知识和友好的服务态度。

## 对话历史
{history_text}

## 当前用户消息
"{message}"{context_text}

## 回复指南
1. **专业性**: 提供准确、实用的旅行建议和信息
2. **个性化**: 根据用户的具体情况和偏好定制回复
3. **简洁性**: 回复简洁明了，重点突出
4. **可操作性**: 提供具体的建议和下一步行动指导

## 特殊情况处理
- 如果用户询问具体的行程调整，建议使用具体的调整指令
- 如果超出旅行规划范围，礼貌地引导回到主题

请直接提供回复内容，不要包含格式标记或前缀。"""

    @staticmethod
    def build_content_analysis_prompt(contents: Sequence[ExtractedContent]) -> str:
        """批量内容分析提示"""
        summary = [
            {
                "platform": content.platform.value,
                "title": content.title,
                "description": content.description,
                "locations": [l.name for l in content.locations],
                "activities": [a.name for a in content.activities],
                "tags": list(content.tags),
                "stats": content.stats.model_dump(),
                "mediaCount": len(content.media),
            }
            for content in contents
        ]
        return f"""你是一个专业的旅行内容分析师。请对以下旅行内容进行深度分析，提供全面的洞察和建议。

## 待分析内容
{_dumps(summary)}

## 分析要求
请按照以下JSON格式返回详细的分析结果：

```json
{{
  "locations": [
    {{
      "name": "地点名称",
      "type": "CITY|ATTRACTION|DISTRICT|LANDMARK",
      "coordinates": [纬度, 经度],
      "popularity_score": 0-100,
      "mentioned_count": 在内容中的提及次数,
      "related_activities": ["相关活动1", "相关活动2"],
      "best_time_to_visit": "最佳游览时间建议",
      "estimated_duration": 建议游览时长(分钟)
    }}
  ],
  "activities": [
    {{
      "name": "活动名称",
      "category": "SIGHTSEEING|DINING|SHOPPING|ENTERTAINMENT|CULTURE|NATURE|ADVENTURE",
      "popularity_score": 0-100,
      "mentioned_count": 提及次数,
      "estimated_cost": 预估费用,
      "duration": 持续时间(分钟),
      "difficulty_level": "EASY|MODERATE|HARD",
      "best_season": ["春", "夏", "秋", "冬"],
      "tips": ["实用建议1", "实用建议2"]
    }}
  ],
  "themes": ["主要主题1", "主要主题2", "主要主题3"],
  "quality_score": 0-100,
  "recommendations": [
    {{"type": "MUST_VISIT|RECOMMENDED|OPTIONAL", "title": "推荐标题", "description": "推荐描述", "reason": "推荐理由"}}
  ],
  "sentiment": {{
    "overall_sentiment": "POSITIVE|NEUTRAL|NEGATIVE",
    "enthusiasm_level": 0-100,
    "recommendation_strength": 0-100,
    "concerns": ["关注点1"],
    "highlights": ["亮点1"]
  }},
  "travel_insights": {{
    "destination_type": "URBAN|NATURE|CULTURAL|BEACH|ADVENTURE|MIXED",
    "travel_style": ["休闲", "深度", "打卡", "体验"],
    "budget_level": "BUDGET|MID_RANGE|LUXURY|MIXED",
    "target_audience": ["年轻人", "家庭", "情侣", "中老年"],
    "seasonal_preferences": ["春季", "夏季", "秋季", "冬季"],
    "duration_recommendation": {{"min_days": 最少建议天数, "max_days": 最多建议天数, "optimal_days": 最佳天数}}
  }}
}}
```

## 分析维度
1. **地理分析**: 识别热门地点，评估地理分布和可达性
2. **活动分析**: 分类活动类型，评估受欢迎程度和适用性
3. **情感分析**: 分析内容的情感倾向和推荐强度
4. **受众分析**: 识别目标受众和适用场景
5. **预算分析**: 评估消费水平和预算要求

{JSON_ONLY}"""

    @staticmethod
    def build_quality_assessment_prompt(content: ExtractedContent) -> str:
        """单条内容质量评估提示"""
        stats = content.stats
        return f"""请评估以下旅行内容的质量和实用性：

## 内容信息
- **标题**: {content.title}
- **描述**: {content.description}
- **来源平台**: {content.platform.value}
- **地点数量**: {len(content.locations)}个
- **活动数量**: {len(content.activities)}个
- **媒体数量**: {len(content.media)}个
- **标签数量**: {len(content.tags)}个
- **互动数据**: 点赞{stats.likes} | 评论{stats.comments} | 分享{stats.shares}

## 评估要求
请返回JSON格式的评估结果：

```json
{{
  "quality_score": 0-100,
  "relevance_score": 0-100,
  "completeness_score": 0-100,
  "issues": ["存在的问题1", "存在的问题2"],
  "suggestions": ["改进建议1", "改进建议2"]
}}
```

{JSON_ONLY}"""

    @staticmethod
    def build_multimodal_analysis_prompt(text_content: str, image_descriptions: Sequence[str]) -> str:
        """图文综合分析提示"""
        images = "\n".join(f"图像{index + 1}: {desc}" for index, desc in enumerate(image_descriptions)) or "（无图像）"
        return f"""你是一个专业的多模态旅行内容分析师。请综合分析以下文本和图像内容，提供深度洞察。

## 文本内容
{text_content}

## 图像描述
{images}

## 分析要求
请进行多模态综合分析，返回JSON格式结果：

```json
{{
  "content_coherence": {{"text_image_alignment": 0-100, "narrative_consistency": 0-100, "visual_storytelling": 0-100}},
  "extracted_insights": {{
    "locations": [{{"name": "地点名称", "confidence": 0-100, "source": "TEXT|IMAGE|BOTH"}}],
    "activities": [{{"name": "活动名称", "confidence": 0-100, "source": "TEXT|IMAGE|BOTH"}}],
    "atmosphere": {{
      "mood": "RELAXED|EXCITING|CULTURAL|ADVENTUROUS|ROMANTIC",
      "crowd_level": "CROWDED|MODERATE|QUIET",
      "time_of_day": "MORNING|AFTERNOON|EVENING|NIGHT",
      "season": "SPRING|SUMMER|AUTUMN|WINTER"
    }}
  }},
  "travel_appeal": {{"inspiration_level": 0-100, "practical_value": 0-100, "authenticity": 0-100}}
}}
```

{JSON_ONLY}"""

    @staticmethod
    def build_day_plan_prompt(
        day_number: int,
        theme: str,
        locations: Sequence[str],
        activities: Sequence[str],
        requirements: UserRequirements,
    ) -> str:
        """单日行程生成提示"""
        budget = f"{requirements.budget:g}元" if requirements.budget else "灵活"
        return f"""请为第{day_number}天生成详细的旅行计划：

主题：{theme}
可用地点：{_join(locations, '无')}
可用活动：{_join(activities, '无')}
旅行人数：{requirements.travelers}人
预算考虑：{budget}

请返回JSON格式的每日计划，字段包括 dayNumber、date、title、theme、activities（含 startTime、endTime、type、title、description、location、estimatedCost、tips）和 dailySummary。

{JSON_ONLY}"""

    @staticmethod
    def build_preference_prompt(requirements: UserRequirements) -> str:
        """从出行需求推断推荐偏好"""
        return f"""分析用户需求并返回偏好设置JSON: {json.dumps(requirements.to_json_dict(), ensure_ascii=False)}

返回格式：
```json
{{
  "budget_range": "low|medium|high",
  "activity_types": ["sightseeing", "dining"],
  "travel_style": "relaxed|adventure|cultural|luxury",
  "group_type": "solo|couple|family|friends",
  "interests": ["culture", "food"],
  "avoid_list": []
}}
```

{JSON_ONLY}"""

    @staticmethod
    def build_recommendation_description_prompt(content: ExtractedContent, themes: Sequence[str]) -> str:
        return f"基于以下内容生成推荐描述：标题：{content.title}，描述：{content.description}，主题：{_join(themes, '无')}。请用一两句话直接给出描述。"

    @staticmethod
    def build_recommendation_reasoning_prompt(preferences: dict, requirements: UserRequirements, titles: Sequence[str]) -> str:
        return (
            f"基于用户偏好{json.dumps(preferences, ensure_ascii=False)}"
            f"和需求{json.dumps(requirements.to_json_dict(), ensure_ascii=False)}，"
            f"为以下推荐生成理由：{', '.join(titles)}"
        )

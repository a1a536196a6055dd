"""模型输出解析单元测试"""

import pytest

from devinn.core.exceptions import MalformedModelOutputError
from devinn.schemas.analysis import ContentQualityReport
from devinn.services.ai.output_parser import clean_llm_response, decode_model_output, parse_json_output


class TestCleanResponse:
    def test_strip_code_fence(self):
        raw = '```json\n{"a": 1}\n```'
        assert clean_llm_response(raw) == '{"a": 1}'

    def test_none(self):
        assert clean_llm_response(None) == ""


class TestParseJsonOutput:
    """JSON 解析测试"""

    def test_plain_json(self):
        assert parse_json_output('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_json_with_surrounding_text(self):
        raw = '好的，以下是结果：\n{"quality_score": 90}\n希望对你有帮助'
        assert parse_json_output(raw) == {"quality_score": 90}

    def test_invalid_json(self):
        with pytest.raises(MalformedModelOutputError) as exc_info:
            parse_json_output("这不是JSON", "分析失败")
        assert str(exc_info.value) == "分析失败"
        assert exc_info.value.raw_response == "这不是JSON"


class TestDecodeModelOutput:
    """结构校验测试"""

    def test_decode(self):
        report = decode_model_output('```json\n{"quality_score": 120, "issues": "太短"}\n```', ContentQualityReport)
        assert report.quality_score == 100
        assert report.issues == ["太短"]

    def test_non_object_rejected(self):
        with pytest.raises(MalformedModelOutputError):
            decode_model_output("[1, 2, 3]", ContentQualityReport)

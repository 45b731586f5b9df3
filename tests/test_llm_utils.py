"""Tests for LLM utility functions."""

import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import HumanMessage
from pydantic import ValidationError

from learnpath.agent.llm_utils import invoke_structured, parse_llm_json_response
from learnpath.schemas.roadmap import RoadmapContent


class TestDirectParsing:
    """Test direct JSON parsing."""

    def test_parse_dict(self):
        assert parse_llm_json_response('{"key": "value"}') == {"key": "value"}

    def test_parse_list(self):
        assert parse_llm_json_response('["item1", "item2"]') == ["item1", "item2"]

    def test_parse_with_whitespace(self):
        """Should handle leading/trailing whitespace."""
        assert parse_llm_json_response('  \n  {"key": "value"}  \n  ') == {"key": "value"}


class TestTrailingCommaFix:
    def test_trailing_comma_in_dict(self):
        assert parse_llm_json_response('{"a": 1, "b": 2,}') == {"a": 1, "b": 2}

    def test_trailing_comma_nested(self):
        result = parse_llm_json_response('{"steps": [1, 2,], "count": 2,}')
        assert result == {"steps": [1, 2], "count": 2}


class TestCodeBlockExtraction:
    def test_extract_json_code_block(self):
        content = """```json
{"careerPath": "Data Analyst"}
```"""
        assert parse_llm_json_response(content) == {"careerPath": "Data Analyst"}

    def test_extract_plain_code_block(self):
        content = """```
{"key": "value"}
```"""
        assert parse_llm_json_response(content) == {"key": "value"}

    def test_extract_with_surrounding_text(self):
        content = """Here is your roadmap:
```json
{"careerPath": "Web Developer",}
```
Good luck!"""
        assert parse_llm_json_response(content) == {"careerPath": "Web Developer"}

    def test_extract_first_code_block(self):
        content = """```json
{"first": true}
```
Some text
```json
{"second": true}
```"""
        assert parse_llm_json_response(content) == {"first": True}


class TestMixedTextExtraction:
    def test_extract_dict_from_text(self):
        content = 'The plan is {"focusArea": "React"} as requested.'
        assert parse_llm_json_response(content) == {"focusArea": "React"}

    def test_extract_with_string_containing_brackets(self):
        content = 'Result: {"task": "Read [chapter 2] of the docs"} done.'
        assert parse_llm_json_response(content) == {"task": "Read [chapter 2] of the docs"}

    def test_extract_with_escaped_quotes(self):
        content = r'Data: {"text": "He said \"hello\""} end.'
        assert parse_llm_json_response(content) == {"text": 'He said "hello"'}


class TestErrorCases:
    def test_empty_string(self):
        with pytest.raises(ValueError, match="Empty LLM response"):
            parse_llm_json_response("")

    def test_none_input(self):
        with pytest.raises(ValueError, match="Empty LLM response"):
            parse_llm_json_response(None)

    def test_plain_text(self):
        with pytest.raises(ValueError, match="no valid JSON found"):
            parse_llm_json_response("Sorry, I can't help with that")

    def test_incomplete_json(self):
        with pytest.raises(ValueError, match="no valid JSON found"):
            parse_llm_json_response('{"careerPath": "Web Developer"')


ROADMAP_REPLY = """Sure! Here is the roadmap:
```json
{
  "careerPath": "Backend Developer",
  "overview": "Server-side development",
  "estimatedTimeframe": "6 Months",
  "steps": [
    {"id": "x", "title": "Python Basics", "description": "Syntax", "duration": "3 Weeks",
     "resources": [{"title": "Docs", "type": "documentation", "description": "Official docs"}],
     "skills": ["Python"], "milestones": ["Write a CLI"]},
  ],
  "weeklySchedule": {"monday": "Study"}
}
```"""


class TestInvokeStructured:
    """Structured output with manual parsing fallback."""

    @pytest.mark.asyncio
    async def test_falls_back_to_manual_parsing(self):
        llm = FakeListChatModel(responses=[ROADMAP_REPLY])

        result = await invoke_structured(llm, RoadmapContent, [HumanMessage(content="plan")])

        assert isinstance(result, RoadmapContent)
        assert result.career_path == "Backend Developer"
        assert result.steps[0].resources[0].type == "documentation"
        assert result.weekly_schedule.monday == "Study"

    @pytest.mark.asyncio
    async def test_invalid_structure_raises(self):
        llm = FakeListChatModel(responses=['{"careerPath": "Backend", "steps": []}'])

        with pytest.raises(ValidationError):
            await invoke_structured(llm, RoadmapContent, [HumanMessage(content="plan")])

    @pytest.mark.asyncio
    async def test_unparseable_reply_raises(self):
        llm = FakeListChatModel(responses=["I cannot produce JSON today."])

        with pytest.raises(ValueError, match="no valid JSON found"):
            await invoke_structured(llm, RoadmapContent, [HumanMessage(content="plan")])

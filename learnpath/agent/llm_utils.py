"""LLM utility functions."""

import json
import re
from collections.abc import Sequence
from typing import Any, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from pydantic import BaseModel

from learnpath.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


def _loads(text: str) -> Any | None:
    """json.loads after stripping whitespace and trailing commas."""
    try:
        return json.loads(_TRAILING_COMMA.sub(r"\1", text.strip()))
    except (json.JSONDecodeError, ValueError):
        return None


def _first_json_block(text: str) -> str | None:
    """Return the first balanced {...} or [...] span, ignoring brackets in strings."""
    start = next((i for i, ch in enumerate(text) if ch in "{["), -1)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            in_string = not in_string
        elif not in_string and ch in "{[":
            depth += 1
        elif not in_string and ch in "}]":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def parse_llm_json_response(content: str | None) -> dict[str, Any] | list[Any]:
    """Parse a JSON completion that may be wrapped in prose or code fences.

    Tries, in order: the raw text, the first fenced code block, and the
    first balanced JSON span found in the text.

    Raises:
        ValueError: If content is empty or no strategy yields JSON
    """
    if not content:
        raise ValueError("Empty LLM response")

    result = _loads(content)
    if result is not None:
        return result

    fenced = _CODE_FENCE.search(content)
    if fenced:
        result = _loads(fenced.group(1))
        if result is not None:
            logger.debug("Parsed JSON from code fence")
            return result

    block = _first_json_block(content)
    if block:
        result = _loads(block)
        if result is not None:
            logger.debug("Parsed JSON from embedded block")
            return result

    logger.error("Failed to parse LLM JSON response", content_preview=content[:200])
    raise ValueError("Failed to parse LLM JSON response: no valid JSON found")


async def invoke_structured(
    llm: BaseChatModel,
    schema: type[ModelT],
    messages: Sequence[BaseMessage],
) -> ModelT:
    """Ask the LLM for output matching ``schema``.

    Uses JSON-mode structured output first and falls back to parsing the raw
    completion by hand. Validation errors from the fallback propagate.
    """
    try:
        structured_llm = llm.with_structured_output(schema, method="json_mode")
        result = await structured_llm.ainvoke(list(messages))
        if isinstance(result, schema):
            return result
        return schema.model_validate(result)
    except Exception as structured_error:
        logger.warning(
            "Structured output failed, falling back to manual JSON parsing",
            schema=schema.__name__,
            error=str(structured_error),
        )

    response = await llm.ainvoke(list(messages))
    content = response.content if isinstance(response.content, str) else str(response.content)
    return schema.model_validate(parse_llm_json_response(content))

"""LangChain ChatAnthropic wrapper for canvas snapshot analysis."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from canvas_observer.config import settings
from canvas_observer.engine.entities import VisionUpdate
from canvas_observer.llm.model_router import get_model_for_quality
from canvas_observer.llm.prompts import get_vision_prompt
from canvas_observer.models.analysis import AnalysisResult, VisionAnalysis, VisionRequest
from canvas_observer.utils.imaging import strip_data_url

logger = logging.getLogger(__name__)


def build_vision_request(update: VisionUpdate) -> VisionRequest:
    return VisionRequest(
        problem_image_base64=strip_data_url(update.problem_image),
        canvas_image_base64=strip_data_url(update.canvas_image),
        quality_used=update.quality,
        context=update.context,
        timestamp=update.timestamp_ms,
    )


def basic_analysis(context: str) -> VisionAnalysis:
    """Placeholder reading used when no model is configured or the reply is unusable."""
    return VisionAnalysis(
        math_concepts=["fractions", "visual_representation"],
        student_actions=["drawing", "using_tools"],
        drawing_description=f"Student work on canvas - {context}",
        problem_progress="working",
        suggestions=["Continue exploring", "Try different approach"],
        off_task_detected=False,
        confidence=0.8,
    )


def parse_analysis(text: str) -> VisionAnalysis | None:
    """Parse model output (bare JSON or JSON in a markdown code block)."""
    json_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if json_match:
        text = json_match.group(1)
    else:
        brace_match = re.search(r"\{[\s\S]*\}", text)
        if brace_match:
            text = brace_match.group(0)

    try:
        return VisionAnalysis.model_validate(json.loads(text.strip()))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Could not parse vision analysis: %s", e)
        return None


def _image_block(b64: str) -> dict[str, Any]:
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": "image/jpeg", "data": b64},
    }


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
        elif isinstance(block, str):
            parts.append(block)
    return "".join(parts)


async def analyze_snapshot(request: VisionRequest, llm: Any | None = None) -> AnalysisResult:
    """Send one snapshot pair to the vision model and return its structured reading."""
    if not request.canvas_image_base64:
        logger.debug("Empty canvas for %s, skipping the vision model", request.context)
        return AnalysisResult(analysis=basic_analysis(request.context).model_dump(), text=None)
    if llm is None and not settings.anthropic_api_key:
        return AnalysisResult(analysis=basic_analysis(request.context).model_dump(), text=None)

    from langchain_core.messages import HumanMessage

    if llm is None:
        from langchain_anthropic import ChatAnthropic

        llm = ChatAnthropic(
            model=get_model_for_quality(request.quality_used),
            api_key=settings.anthropic_api_key,
            max_tokens=settings.vision_max_tokens,
        )

    has_problem = bool(request.problem_image_base64)
    content: list[dict[str, Any]] = [{"type": "text", "text": get_vision_prompt(request.context, has_problem)}]
    if has_problem:
        content.append(_image_block(request.problem_image_base64))
    content.append(_image_block(request.canvas_image_base64))

    response = await llm.ainvoke([HumanMessage(content=content)])
    text = _content_text(response.content)

    analysis = parse_analysis(text)
    if analysis is None:
        return AnalysisResult(analysis=basic_analysis(request.context).model_dump(), text=text)
    logger.debug("Vision analysis for %s: %s", request.context, analysis.problem_progress)
    return AnalysisResult(analysis=analysis.model_dump(), text=text)


async def analyze_update(update: VisionUpdate) -> AnalysisResult:
    """ObservationQueue analyzer: build the wire request and analyze it."""
    return await analyze_snapshot(build_vision_request(update))

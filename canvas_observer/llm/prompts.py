"""Prompt for the canvas-reading vision call."""

from __future__ import annotations

_VISION_TEMPLATE = """You are watching a student work on a math problem on a drawing canvas.
You receive two images: first the problem the student was given, then their canvas.

The canvas snapshot was taken because of this event: {context}

Describe what the student has drawn and how it relates to the problem. Respond with a
single JSON object and nothing else:

```json
{{
  "math_concepts": ["..."],
  "student_actions": ["..."],
  "drawing_description": "...",
  "problem_progress": "not_started | exploring | working | stuck | complete",
  "suggestions": ["..."],
  "off_task_detected": false,
  "confidence": 0.0
}}
```

Rules:
1. Only describe marks that are actually on the canvas. An empty canvas is "not_started".
2. `confidence` is your confidence in the description, from 0 to 1.
3. Keep `suggestions` short and phrased for a young student."""

_PROBLEM_MISSING = "(no problem image was provided; only the canvas follows)"


def get_vision_prompt(context: str, has_problem_image: bool = True) -> str:
    prompt = _VISION_TEMPLATE.format(context=context)
    if not has_problem_image:
        prompt += "\n\n" + _PROBLEM_MISSING
    return prompt

"""Renderings of interaction errors: markdown, JSON and a one-line summary."""
from __future__ import annotations

import json
from typing import Any, Dict, List

from tapguard.core.schemas import Frame, Target, TypeTarget, format_number
from tapguard.errors.codes import InteractionError

MAX_TABLE_SUGGESTIONS = 5


def format_target(target: Target) -> str:
    """
    Pretty-print a target for messages.

    ``#id``, ``"label"``, ``text:"..."``, ``predicate(...)``, ``(x,y)``,
    and ``type`` or ``type[i]``.
    """
    kind = target.kind
    if kind == "identifier":
        return f"#{target.value}"
    if kind == "label":
        return f'"{target.value}"'
    if kind == "text":
        return f'text:"{target.value}"'
    if kind == "predicate":
        return f"predicate({target.value})"
    if kind == "coordinates":
        return f"({target.value})"
    if isinstance(target, TypeTarget) and target.index is not None:
        return f"{target.value}[{target.index}]"
    return target.value


def format_interaction_error(error: InteractionError, include_screenshot: bool = True) -> str:
    """Markdown for chat and log surfaces; sections appear only when they have data."""
    lines: List[str] = [f"## ✗ {error.title}", ""]

    if error.target is not None:
        lines.append(f"**Target**: `{format_target(error.target)}`")
    lines.extend([f"**Error**: {error.message}", ""])

    if error.position is not None:
        pos = error.position
        lines.extend(
            [
                f"**Position**: ({format_number(pos.x)}, {format_number(pos.y)}) "
                f"{format_number(pos.width)}×{format_number(pos.height)}",
                "",
            ]
        )

    if error.suggestions:
        lines.extend(
            [
                "### Similar Elements Found",
                "",
                "| Target | Similarity | Reason |",
                "|--------|------------|--------|",
            ]
        )
        for suggestion in error.suggestions[:MAX_TABLE_SUGGESTIONS]:
            lines.append(
                f"| `{format_target(suggestion.target)}` | {suggestion.similarity}% | {suggestion.reason} |"
            )
        lines.append("")

    lines.extend(["### Troubleshooting", "", f"**Hint**: {error.hint}", ""])

    if error.suggested_action:
        lines.extend([f"**Suggested Action**: {error.suggested_action}", ""])

    if include_screenshot and error.screenshot_path:
        lines.extend(["### Screenshot", "", f"`{error.screenshot_path}`"])

    return "\n".join(lines) + "\n"


def interaction_error_to_dict(error: InteractionError) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "code": error.code.value,
        "title": error.title,
        "message": error.message,
        "hint": error.hint,
    }
    if error.target is not None:
        data["target"] = error.target.to_dict()
    if error.suggestions is not None:
        data["suggestions"] = [
            {
                "target": format_target(s.target),
                "similarity": s.similarity,
                "reason": s.reason,
            }
            for s in error.suggestions
        ]
    if error.suggested_action is not None:
        data["suggestedAction"] = error.suggested_action
    if error.position is not None:
        data["position"] = _plain_frame(error.position)
    if error.screenshot_path is not None:
        data["screenshotPath"] = error.screenshot_path
    return data


def format_interaction_error_as_json(error: InteractionError) -> str:
    return json.dumps(interaction_error_to_dict(error), indent=2, ensure_ascii=False)


def format_interaction_error_compact(error: InteractionError) -> str:
    message = f"{error.title}: {error.message}"
    if error.suggestions:
        message += f" (Did you mean: {format_target(error.suggestions[0].target)}?)"
    return message


def _plain_frame(frame: Frame) -> Dict[str, float]:
    return {k: int(v) if float(v).is_integer() else v for k, v in frame.to_dict().items()}

"""
Builders that turn validation and action outcomes into InteractionError.

This is the single translation point between engine results
(ValidationResult, HittabilityResult, ActionResult) and the user-facing
error taxonomy in ``tapguard.errors.codes``.
"""
from __future__ import annotations

from typing import List, Optional

from tapguard.core.exceptions import InvalidErrorSourceError
from tapguard.core.logging import get_logger
from tapguard.core.schemas import (
    ActionResult,
    ElementNode,
    HittabilityResult,
    NotHittableReason,
    SuggestedTarget,
    Target,
    ToolResult,
    ValidationResult,
)
from tapguard.errors.codes import (
    INTERACTION_ERROR_MESSAGES,
    InteractionError,
    InteractionErrorCode,
    map_action_status_to_code,
    map_not_hittable_reason_to_code,
)
from tapguard.errors.formatting import format_interaction_error_compact, format_target
from tapguard.validator.suggestions import suggest_alternatives

log = get_logger("interaction_errors")

# Number of suggestions quoted in a suggested action
TOP_SUGGESTIONS = 3


def _join_top(suggestions: List[SuggestedTarget]) -> str:
    return ", ".join(format_target(s.target) for s in suggestions[:TOP_SUGGESTIONS])


def create_element_not_found_error(
    target: Target,
    root: Optional[ElementNode] = None,
    max_suggestions: int = 5,
    screenshot_path: Optional[str] = None,
) -> InteractionError:
    """Not-found error; with a tree, it carries ranked suggestions."""
    template = INTERACTION_ERROR_MESSAGES[InteractionErrorCode.ELEMENT_NOT_FOUND]

    suggestions: Optional[List[SuggestedTarget]] = None
    if root is not None:
        suggestions = suggest_alternatives(target, root, max_suggestions=max_suggestions, min_similarity=30)
        log.debug("suggestions_generated", target=format_target(target), count=len(suggestions))

    if suggestions:
        action = f"Try one of these similar elements: {_join_top(suggestions)}"
    else:
        action = "Inspect the UI hierarchy to see the available elements"

    return InteractionError(
        code=InteractionErrorCode.ELEMENT_NOT_FOUND,
        title=template.title,
        message=f"Element not found: {format_target(target)}",
        hint=template.hint,
        suggestions=suggestions,
        suggested_action=action,
        screenshot_path=screenshot_path,
        target=target,
    )


def create_element_not_hittable_error(
    target: Target,
    hittability: HittabilityResult,
    screenshot_path: Optional[str] = None,
) -> InteractionError:
    code = map_not_hittable_reason_to_code(hittability.reason or NotHittableReason.NOT_HITTABLE)
    template = INTERACTION_ERROR_MESSAGES[code]
    return InteractionError(
        code=code,
        title=template.title,
        message=hittability.message,
        hint=template.hint,
        suggested_action=hittability.suggested_action,
        position=hittability.position,
        screenshot_path=screenshot_path,
        target=target,
    )


def create_tool_not_installed_error(install_instructions: Optional[str] = None) -> InteractionError:
    template = INTERACTION_ERROR_MESSAGES[InteractionErrorCode.MAESTRO_NOT_INSTALLED]
    return InteractionError(
        code=InteractionErrorCode.MAESTRO_NOT_INSTALLED,
        title=template.title,
        message="Maestro Mobile CLI is not installed or not in PATH.",
        hint=install_instructions or template.hint,
        suggested_action="Run the installation command above and restart your terminal.",
    )


def create_flow_timeout_error(
    flow_path: str,
    timeout_ms: int,
    screenshot_path: Optional[str] = None,
) -> InteractionError:
    template = INTERACTION_ERROR_MESSAGES[InteractionErrorCode.FLOW_TIMEOUT]
    return InteractionError(
        code=InteractionErrorCode.FLOW_TIMEOUT,
        title=template.title,
        message=f'Flow "{flow_path}" timed out after {timeout_ms}ms',
        hint=template.hint,
        suggested_action=f"Increase timeout to {timeout_ms * 2}ms or split the flow into smaller steps.",
        screenshot_path=screenshot_path,
    )


def create_app_crashed_error(
    bundle_id: str,
    crash_type: Optional[str] = None,
    crash_message: Optional[str] = None,
    screenshot_path: Optional[str] = None,
) -> InteractionError:
    template = INTERACTION_ERROR_MESSAGES[InteractionErrorCode.APP_CRASHED]

    message = f'App "{bundle_id}" crashed during interaction'
    if crash_type:
        message += f": {crash_type}"
    if crash_message:
        message += f" - {crash_message}"

    return InteractionError(
        code=InteractionErrorCode.APP_CRASHED,
        title=template.title,
        message=message,
        hint=template.hint,
        suggested_action="Restart the app and check crash logs for the root cause.",
        screenshot_path=screenshot_path,
    )


def create_error_from_action_result(
    result: ActionResult,
    target: Optional[Target] = None,
    root: Optional[ElementNode] = None,
) -> InteractionError:
    code = map_action_status_to_code(result.status)

    if code is InteractionErrorCode.ELEMENT_NOT_FOUND and target is not None and root is not None:
        return create_element_not_found_error(target, root, screenshot_path=result.screenshot_path)

    template = INTERACTION_ERROR_MESSAGES[code]
    action = None
    if result.suggestions:
        action = f"Try: {', '.join(result.suggestions[:TOP_SUGGESTIONS])}"

    return InteractionError(
        code=code,
        title=template.title,
        message=result.error or template.title,
        hint=template.hint,
        suggested_action=action,
        screenshot_path=result.screenshot_path,
        target=target,
    )


def create_error_from_validation_result(result: ValidationResult, target: Target) -> InteractionError:
    """
    Translate a failed validation into an InteractionError.

    Raises:
        InvalidErrorSourceError: If ``result`` is valid; that is a caller bug.
    """
    if result.valid:
        raise InvalidErrorSourceError(
            "Cannot create error from valid result",
            context={"target": format_target(target)},
        )

    code = map_not_hittable_reason_to_code(result.reason or NotHittableReason.NOT_FOUND)
    template = INTERACTION_ERROR_MESSAGES[code]
    action = None
    if result.suggestions:
        action = f"Try one of these: {_join_top(result.suggestions)}"

    return InteractionError(
        code=code,
        title=template.title,
        message=result.message or template.title,
        hint=template.hint,
        suggestions=result.suggestions,
        suggested_action=action,
        target=target,
    )


def create_tool_result_from_error(error: InteractionError) -> ToolResult:
    return ToolResult(
        success=False,
        error=format_interaction_error_compact(error),
        error_code=error.code.value,
    )


def has_element_suggestions(error: InteractionError) -> bool:
    return error.code is InteractionErrorCode.ELEMENT_NOT_FOUND and bool(error.suggestions)


def get_best_suggestion(error: InteractionError) -> Optional[SuggestedTarget]:
    # Suggestions arrive sorted, best first
    if not error.suggestions:
        return None
    return error.suggestions[0]

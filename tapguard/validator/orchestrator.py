from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from tapguard.core.config import DEFAULT_CONFIG, TapguardConfig
from tapguard.core.logging import get_logger
from tapguard.core.metrics import record_validation
from tapguard.core.schemas import ElementNode, NotHittableReason, Target, ValidationResult
from tapguard.errors.formatting import format_target
from tapguard.validator.hittability import check_hittable
from tapguard.validator.resolver import resolve
from tapguard.validator.suggestions import suggest_alternatives

log = get_logger("validator")

ACTION_TYPES = {
    "tap",
    "doubleTap",
    "longPress",
    "typeText",
    "clearText",
    "scroll",
    "scrollTo",
    "swipe",
    "pinch",
    "waitForElement",
    "waitForNotExist",
    "assertExists",
    "assertNotExists",
    "assertEnabled",
    "assertDisabled",
    "assertHittable",
}

# Existence is enough for these
EXISTENCE_ACTIONS = {"waitForElement", "assertExists"}
ABSENCE_ACTIONS = {"waitForNotExist", "assertNotExists"}


@dataclass
class ValidationOptions:
    """
    Which checks validate_target runs once the target resolves.

    Attributes:
        require_visible: Reject invisible elements
        require_enabled: Reject disabled elements
        check_hittable: Run the full hittability chain
        max_suggestions: Cap on suggestions when the target is not found
        min_similarity: Similarity floor for suggestions
    """
    require_visible: bool = True
    require_enabled: bool = True
    check_hittable: bool = True
    max_suggestions: Optional[int] = None
    min_similarity: Optional[int] = None


def validate_target(
    target: Target,
    root: ElementNode,
    options: Optional[ValidationOptions] = None,
    config: Optional[TapguardConfig] = None,
) -> ValidationResult:
    """Resolve ``target`` and decide whether it can be interacted with."""
    opts = options or ValidationOptions()
    cfg = config or DEFAULT_CONFIG
    result = _validate(target, root, opts, cfg)
    record_validation("valid" if result.valid else result.reason.value)
    return result


def _validate(
    target: Target,
    root: ElementNode,
    opts: ValidationOptions,
    cfg: TapguardConfig,
) -> ValidationResult:
    log.debug("validating_target", target=target.to_dict())
    formatted = format_target(target)

    element = resolve(target, root)
    if element is None:
        suggestions = suggest_alternatives(
            target,
            root,
            max_suggestions=opts.max_suggestions,
            min_similarity=opts.min_similarity,
            config=cfg,
        )
        return ValidationResult(
            valid=False,
            reason=NotHittableReason.NOT_FOUND,
            message=f"Element not found: {formatted}",
            suggestions=suggestions,
        )

    if opts.require_visible and not element.is_visible:
        return ValidationResult(
            valid=False,
            element=element,
            reason=NotHittableReason.NOT_VISIBLE,
            message=f'Element "{formatted}" exists but is not visible',
            confidence=100,
        )

    if opts.require_enabled and not element.is_enabled:
        return ValidationResult(
            valid=False,
            element=element,
            reason=NotHittableReason.NOT_ENABLED,
            message=f'Element "{formatted}" is disabled',
            confidence=100,
        )

    if opts.check_hittable:
        hittability = check_hittable(element, root, cfg)
        if not hittability.hittable:
            return ValidationResult(
                valid=False,
                element=element,
                reason=hittability.reason,
                message=hittability.message,
                confidence=100,
            )

    log.debug("target_validated", target=formatted)
    return ValidationResult(valid=True, element=element, confidence=100)


def validate_for_action(
    target: Target,
    root: ElementNode,
    action_type: str,
    config: Optional[TapguardConfig] = None,
) -> ValidationResult:
    """
    Validate ``target`` with the checks ``action_type`` needs.

    Absence actions invert the contract: the result is valid when the
    target does not resolve. A target that is still present fails with
    reason ``not_found`` and a "still exists" message.
    """
    if action_type in ABSENCE_ACTIONS:
        element = resolve(target, root)
        if element is None:
            record_validation("valid")
            return ValidationResult(valid=True)
        record_validation(NotHittableReason.NOT_FOUND.value)
        return ValidationResult(
            valid=False,
            element=element,
            reason=NotHittableReason.NOT_FOUND,
            message=f'Element "{format_target(target)}" still exists',
        )

    options = ValidationOptions()
    if action_type in EXISTENCE_ACTIONS or action_type == "assertDisabled":
        # A disabled element always fails the hittable chain, so assertDisabled skips it too
        options = replace(options, require_enabled=False, check_hittable=False)
    elif action_type not in ACTION_TYPES:
        log.debug("unknown_action_type", action_type=action_type)

    return validate_target(target, root, options, config)

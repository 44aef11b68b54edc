"""Target resolution and hittability validation."""
from tapguard.validator.hittability import check_hittable
from tapguard.validator.orchestrator import ValidationOptions, validate_for_action, validate_target
from tapguard.validator.resolver import resolve, target_exists
from tapguard.validator.suggestions import create_target_for_element, suggest_alternatives

__all__ = [
    "ValidationOptions",
    "check_hittable",
    "create_target_for_element",
    "resolve",
    "suggest_alternatives",
    "target_exists",
    "validate_for_action",
    "validate_target",
]

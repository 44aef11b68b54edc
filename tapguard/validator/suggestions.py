from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from tapguard.core.config import DEFAULT_CONFIG, TapguardConfig
from tapguard.core.logging import get_logger
from tapguard.core.metrics import suggestions_per_lookup
from tapguard.core.schemas import (
    CoordinatesTarget,
    ElementNode,
    IdentifierTarget,
    LabelTarget,
    SuggestedTarget,
    Target,
    TextTarget,
)
from tapguard.observer.similarity import calculate_string_similarity, contains_match, round_half_up
from tapguard.observer.tree import collect_elements, get_element_center, is_input_type

log = get_logger("suggestions")

# (attribute, reason template) compared against the target value, in order
_FIELD_STRATEGIES = (
    ("identifier", 'Similar identifier: "{}"'),
    ("label", 'Similar label: "{}"'),
    ("value", 'Contains text: "{}"'),
    ("title", 'Similar title: "{}"'),
)


def suggest_alternatives(
    target: Target,
    root: ElementNode,
    max_suggestions: Optional[int] = None,
    min_similarity: Optional[int] = None,
    config: Optional[TapguardConfig] = None,
) -> List[SuggestedTarget]:
    """
    Rank interactable elements by how closely they match ``target``.

    Each candidate takes the best score of its identifier, label, value,
    title and substring matches, plus a bonus when its type equals the
    target's ``element_type``. Candidates under ``min_similarity`` and
    those no target can be built for are dropped. The result is sorted by
    similarity, highest first; equal scores keep tree traversal order.
    """
    cfg = config or DEFAULT_CONFIG
    if max_suggestions is None:
        max_suggestions = cfg.suggestions.max_suggestions
    if min_similarity is None:
        min_similarity = cfg.suggestions.min_similarity
    input_types = cfg.hittability.input_types
    type_bonus = cfg.suggestions.element_type_bonus

    term = target.value.lower()
    wanted_type = target.element_type.lower() if target.element_type else None

    ranked: List[Tuple[int, int, SuggestedTarget]] = []
    for order, element in enumerate(collect_elements(root)):
        if not _is_interactable(element, input_types):
            continue

        similarity, reason = _score(element, term)

        if wanted_type and element.type.lower() == wanted_type:
            similarity = min(100, similarity + type_bonus)
            reason = reason or f"Same type: {element.type}"

        if similarity < min_similarity:
            continue

        suggested = create_target_for_element(element)
        if suggested is None:
            continue
        score = round_half_up(similarity)
        ranked.append((-score, order, SuggestedTarget(suggested, element, score, reason)))

    ranked.sort(key=lambda item: (item[0], item[1]))
    suggestions = [item[2] for item in ranked[:max_suggestions]]
    suggestions_per_lookup.observe(len(suggestions))
    log.debug("suggestions_ranked", target=target.value, candidates=len(ranked), returned=len(suggestions))
    return suggestions


def _is_interactable(element: ElementNode, input_types) -> bool:
    return (
        element.is_enabled
        and element.is_visible
        and (element.is_hittable or is_input_type(element.type, input_types))
    )


def _score(element: ElementNode, term: str) -> Tuple[float, str]:
    best = 0.0
    reason = ""
    for attr, template in _FIELD_STRATEGIES:
        field_value = getattr(element, attr)
        if not field_value:
            continue
        similarity = calculate_string_similarity(term, field_value.lower())
        if similarity > best:
            best = similarity
            reason = template.format(field_value)

    match = contains_match(element, term)
    if match is not None and match.similarity > best:
        best, reason = match.similarity, match.reason
    return best, reason


# ---------------------------------------------------------------------------
# Target reconstruction
# ---------------------------------------------------------------------------


def _identifier_target(element: ElementNode) -> Optional[Target]:
    return IdentifierTarget(element.identifier) if element.identifier else None


def _label_target(element: ElementNode) -> Optional[Target]:
    return LabelTarget(element.label) if element.label else None


def _title_target(element: ElementNode) -> Optional[Target]:
    return TextTarget(element.title) if element.title else None


def _value_target(element: ElementNode) -> Optional[Target]:
    return TextTarget(element.value) if element.value else None


def _center_target(element: ElementNode) -> Optional[Target]:
    center = get_element_center(element)
    if center is None:
        return None
    return CoordinatesTarget(*center)


TARGET_STRATEGIES: Tuple[Callable[[ElementNode], Optional[Target]], ...] = (
    _identifier_target,
    _label_target,
    _title_target,
    _value_target,
    _center_target,
)


def create_target_for_element(element: ElementNode) -> Optional[Target]:
    """Build the most stable target for an element; the first strategy that applies wins."""
    for strategy in TARGET_STRATEGIES:
        target = strategy(element)
        if target is not None:
            return target
    return None

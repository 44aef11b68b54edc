from __future__ import annotations

from typing import Callable, Dict, List, Optional

from tapguard.core.exceptions import PredicateSyntaxError
from tapguard.core.logging import get_logger
from tapguard.core.schemas import (
    CoordinatesTarget,
    ElementNode,
    IdentifierTarget,
    LabelTarget,
    PredicateTarget,
    Target,
    TextTarget,
    TypeTarget,
)
from tapguard.observer.tree import collect_elements, find_element_at_point
from tapguard.validator.predicate import parse_predicate

log = get_logger("resolver")


def resolve(target: Target, root: ElementNode) -> Optional[ElementNode]:
    """
    Find the element a target addresses, or None.

    A miss is not an error; it is what triggers suggestion ranking.
    """
    handler = _RESOLVERS.get(target.kind)
    if handler is None:
        return None
    return handler(target, root)


def target_exists(target: Target, root: ElementNode) -> bool:
    """Existence only; visibility and enabled state are not considered."""
    return resolve(target, root) is not None


def _first(elements: List[ElementNode], predicate: Callable[[ElementNode], bool]) -> Optional[ElementNode]:
    return next((el for el in elements if predicate(el)), None)


def _by_identifier(target: IdentifierTarget, root: ElementNode) -> Optional[ElementNode]:
    return _first(collect_elements(root), lambda el: el.identifier == target.value)


def _by_label(target: LabelTarget, root: ElementNode) -> Optional[ElementNode]:
    return _first(collect_elements(root), lambda el: el.label == target.value)


def _by_text(target: TextTarget, root: ElementNode) -> Optional[ElementNode]:
    text = target.value
    return _first(
        collect_elements(root),
        lambda el: el.value == text or el.label == text or el.title == text,
    )


def _by_predicate(target: PredicateTarget, root: ElementNode) -> Optional[ElementNode]:
    try:
        predicate = parse_predicate(target.value)
    except PredicateSyntaxError as e:
        log.warning("predicate_rejected", predicate=target.value, position=e.position, error=e.message)
        return None
    return _first(collect_elements(root), predicate.matches)


def _by_coordinates(target: CoordinatesTarget, root: ElementNode) -> Optional[ElementNode]:
    return find_element_at_point(root, target.x, target.y)


def _by_type(target: TypeTarget, root: ElementNode) -> Optional[ElementNode]:
    type_name = target.value.lower()
    matches = [el for el in collect_elements(root) if el.type.lower() == type_name]
    index = target.index if target.index is not None else 0
    if 0 <= index < len(matches):
        return matches[index]
    return None


_RESOLVERS: Dict[str, Callable[..., Optional[ElementNode]]] = {
    IdentifierTarget.kind: _by_identifier,
    LabelTarget.kind: _by_label,
    TextTarget.kind: _by_text,
    PredicateTarget.kind: _by_predicate,
    CoordinatesTarget.kind: _by_coordinates,
    TypeTarget.kind: _by_type,
}

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from tapguard.core.schemas import ElementNode
from tapguard.observer.similarity import round_half_up


def collect_elements(root: ElementNode) -> List[ElementNode]:
    """Flatten the tree in pre-order (root first, children in order)."""
    return [element for element, _depth in iter_with_depth(root)]


def iter_with_depth(root: ElementNode) -> Iterator[Tuple[ElementNode, int]]:
    stack: List[Tuple[ElementNode, int]] = [(root, 0)]
    while stack:
        element, depth = stack.pop()
        yield element, depth
        for child in reversed(element.children):
            stack.append((child, depth + 1))


def elements_at_point(root: ElementNode, x: float, y: float) -> List[ElementNode]:
    return [el for el in collect_elements(root) if el.frame.contains_point(x, y)]


def find_element_at_point(root: ElementNode, x: float, y: float) -> Optional[ElementNode]:
    """
    Return the most specific element under a point.

    Every element whose frame contains the point (edges included) is a
    candidate; the smallest area wins and equal areas keep traversal order.
    """
    candidates = elements_at_point(root, x, y)
    if not candidates:
        return None
    return min(candidates, key=lambda el: el.frame.area)


def get_element_center(element: ElementNode) -> Optional[Tuple[int, int]]:
    """Rounded tap point for an element, or None when it has zero size."""
    frame = element.frame
    if frame.is_zero_size:
        return None
    cx, cy = frame.center
    return round_half_up(cx), round_half_up(cy)


def is_input_type(type_name: str, input_types: Iterable[str]) -> bool:
    return type_name.lower() in input_types

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from tapguard.core.config import DEFAULT_CONFIG, TapguardConfig
from tapguard.core.schemas import ElementNode, HittabilityResult, NotHittableReason
from tapguard.observer.similarity import round_half_up
from tapguard.observer.tree import is_input_type


def check_hittable(
    element: ElementNode,
    root: ElementNode,
    config: Optional[TapguardConfig] = None,
) -> HittabilityResult:
    """
    Decide whether ``element`` can receive a tap.

    Checks run in a fixed order and the first failure wins: existence,
    visibility, enabled state, size, the platform's own hittable flag,
    on-screen bounds, then overlays covering the element's center.
    """
    cfg = config or DEFAULT_CONFIG
    frame = element.frame

    if not element.exists:
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.NOT_FOUND,
            message="Element does not exist in the hierarchy",
        )

    if not element.is_visible:
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.NOT_VISIBLE,
            message="Element is not visible",
            position=frame,
            suggested_action="Wait for the element to become visible or scroll it into view",
        )

    if not element.is_enabled:
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.NOT_ENABLED,
            message="Element is disabled and cannot receive taps",
            position=frame,
            suggested_action="Wait for the element to become enabled or complete required preceding steps",
        )

    if frame.is_zero_size:
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.ZERO_SIZE,
            message="Element has zero size (collapsed or hidden)",
            position=frame,
            suggested_action="Wait for the element to load or expand",
        )

    if not element.is_hittable:
        # Inputs take focus even when the platform says they are not hittable
        if is_input_type(element.type, cfg.hittability.input_types):
            return HittabilityResult(
                hittable=True,
                message="Element can receive input (text field/search field)",
                position=frame,
            )
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.NOT_HITTABLE,
            message="Element is marked as not hittable",
            position=frame,
            suggested_action="The element may be obscured by another view or be in a non-interactive state",
        )

    viewport = cfg.viewport
    if not frame.intersects_viewport(viewport.width, viewport.height):
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.OFF_SCREEN,
            message="Element appears to be off-screen",
            position=frame,
            suggested_action=(
                "Scroll to bring the element into view "
                f"(element at x:{round_half_up(frame.x)}, y:{round_half_up(frame.y)})"
            ),
        )

    obscuring = find_obscuring_element(
        element,
        root,
        cfg.hittability.overlay_types,
        cfg.hittability.obscuring_depth_base,
    )
    if obscuring is not None:
        if "alert" in obscuring.type.lower():
            action = "Dismiss the alert before interacting with this element"
        else:
            action = "Wait for the obscuring element to disappear or dismiss it first"
        return HittabilityResult(
            hittable=False,
            reason=NotHittableReason.OBSCURED,
            message=f"Element is obscured by {describe_element(obscuring)}",
            position=frame,
            suggested_action=action,
        )

    return HittabilityResult(hittable=True, message="Element is hittable", position=frame)


def find_obscuring_element(
    target: ElementNode,
    root: ElementNode,
    overlay_types: Sequence[str] = DEFAULT_CONFIG.hittability.overlay_types,
    depth_base: int = DEFAULT_CONFIG.hittability.obscuring_depth_base,
) -> Optional[ElementNode]:
    """
    Find a visible overlay covering the center of ``target``.

    Stacking order is approximated by tree depth: deeper overlays are
    assumed to be drawn on top. This is a heuristic, not the real render
    order, so a result here is best-effort. Only the target itself (and so
    its subtree) is excluded; an alert still obscures the buttons it holds.
    """
    center_x, center_y = target.frame.center
    candidates: List[Tuple[int, ElementNode]] = []

    stack: List[Tuple[ElementNode, int]] = [(root, 0)]
    while stack:
        element, depth = stack.pop()
        if element is target:
            continue
        frame = element.frame
        if (
            element.is_visible
            and not frame.is_zero_size
            and frame.contains_point(center_x, center_y)
            and any(t in element.type.lower() for t in overlay_types)
        ):
            candidates.append((depth + depth_base, element))
        for child in reversed(element.children):
            stack.append((child, depth + 1))

    if not candidates:
        return None
    best_z = max(z for z, _ in candidates)
    return next(el for z, el in candidates if z == best_z)


def describe_element(element: ElementNode) -> str:
    if element.identifier:
        return f"{element.type} (#{element.identifier})"
    if element.label:
        return f'{element.type} ("{element.label}")'
    return element.type

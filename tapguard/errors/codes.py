"""Interaction error taxonomy and the tables that feed it."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from tapguard.core.schemas import Frame, NotHittableReason, SuggestedTarget, Target


class InteractionErrorCode(str, Enum):
    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    ELEMENT_NOT_HITTABLE = "ELEMENT_NOT_HITTABLE"
    ELEMENT_NOT_VISIBLE = "ELEMENT_NOT_VISIBLE"
    ELEMENT_NOT_ENABLED = "ELEMENT_NOT_ENABLED"
    ELEMENT_OBSCURED = "ELEMENT_OBSCURED"
    ELEMENT_OFF_SCREEN = "ELEMENT_OFF_SCREEN"
    ELEMENT_ZERO_SIZE = "ELEMENT_ZERO_SIZE"
    MAESTRO_NOT_INSTALLED = "MAESTRO_NOT_INSTALLED"
    FLOW_TIMEOUT = "FLOW_TIMEOUT"
    FLOW_VALIDATION_FAILED = "FLOW_VALIDATION_FAILED"
    APP_CRASHED = "APP_CRASHED"
    APP_NOT_RUNNING = "APP_NOT_RUNNING"
    SCREENSHOT_FAILED = "SCREENSHOT_FAILED"
    SIMULATOR_NOT_BOOTED = "SIMULATOR_NOT_BOOTED"
    INTERACTION_TIMEOUT = "INTERACTION_TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    def __str__(self) -> str:
        return self.value


class ErrorTemplate(NamedTuple):
    title: str
    hint: str


INTERACTION_ERROR_MESSAGES: Dict[InteractionErrorCode, ErrorTemplate] = {
    InteractionErrorCode.ELEMENT_NOT_FOUND: ErrorTemplate(
        "Element not found",
        "Inspect the current UI hierarchy to find the correct element identifier or label.",
    ),
    InteractionErrorCode.ELEMENT_NOT_HITTABLE: ErrorTemplate(
        "Element not hittable",
        "The element may be obscured by another view. Try dismissing overlays or scrolling the element fully into view.",
    ),
    InteractionErrorCode.ELEMENT_NOT_VISIBLE: ErrorTemplate(
        "Element not visible",
        "The element exists but is not visible on screen. Try scrolling it into view first.",
    ),
    InteractionErrorCode.ELEMENT_NOT_ENABLED: ErrorTemplate(
        "Element is disabled",
        "The element is in a disabled state. Complete any required preceding steps or wait for it to become enabled.",
    ),
    InteractionErrorCode.ELEMENT_OBSCURED: ErrorTemplate(
        "Element is obscured",
        "Another element is covering the target. Dismiss any alerts, popovers, or modals first.",
    ),
    InteractionErrorCode.ELEMENT_OFF_SCREEN: ErrorTemplate(
        "Element is off-screen",
        "The element is outside the visible screen bounds. Scroll the element into view first.",
    ),
    InteractionErrorCode.ELEMENT_ZERO_SIZE: ErrorTemplate(
        "Element has zero size",
        "The element may be collapsed or hidden. Wait for it to load or expand.",
    ),
    InteractionErrorCode.MAESTRO_NOT_INSTALLED: ErrorTemplate(
        "Maestro CLI not installed",
        'Install Maestro with: `brew tap mobile-dev-inc/tap && brew install maestro` or `curl -Ls "https://get.maestro.mobile.dev" | bash`',
    ),
    InteractionErrorCode.FLOW_TIMEOUT: ErrorTemplate(
        "Flow execution timed out",
        "The flow took too long to complete. Increase the timeout or break the flow into smaller steps.",
    ),
    InteractionErrorCode.FLOW_VALIDATION_FAILED: ErrorTemplate(
        "Flow validation failed",
        "Check the YAML syntax and ensure all action types are valid. Use `maestro validate <flow.yaml>` for detailed errors.",
    ),
    InteractionErrorCode.APP_CRASHED: ErrorTemplate(
        "App crashed during interaction",
        "The app crashed during the operation. Check the crash logs and restart the app.",
    ),
    InteractionErrorCode.APP_NOT_RUNNING: ErrorTemplate(
        "App is not running",
        "Launch the app before interacting with it.",
    ),
    InteractionErrorCode.SCREENSHOT_FAILED: ErrorTemplate(
        "Failed to capture screenshot",
        "Ensure the simulator is running and responsive. Try restarting the Simulator if frozen.",
    ),
    InteractionErrorCode.SIMULATOR_NOT_BOOTED: ErrorTemplate(
        "No simulator is booted",
        'Boot a simulator with: `xcrun simctl boot "iPhone 15 Pro"` or open Simulator.app.',
    ),
    InteractionErrorCode.INTERACTION_TIMEOUT: ErrorTemplate(
        "Interaction timed out",
        "The element did not respond in time. Increase the timeout or check if the app is frozen.",
    ),
    InteractionErrorCode.UNKNOWN_ERROR: ErrorTemplate(
        "Unknown error",
        "An unexpected error occurred. Check the error details and try again.",
    ),
}

_REASON_CODES: Dict[NotHittableReason, InteractionErrorCode] = {
    NotHittableReason.NOT_FOUND: InteractionErrorCode.ELEMENT_NOT_FOUND,
    NotHittableReason.NOT_VISIBLE: InteractionErrorCode.ELEMENT_NOT_VISIBLE,
    NotHittableReason.NOT_ENABLED: InteractionErrorCode.ELEMENT_NOT_ENABLED,
    NotHittableReason.ZERO_SIZE: InteractionErrorCode.ELEMENT_ZERO_SIZE,
    NotHittableReason.OBSCURED: InteractionErrorCode.ELEMENT_OBSCURED,
    NotHittableReason.OFF_SCREEN: InteractionErrorCode.ELEMENT_OFF_SCREEN,
    NotHittableReason.NOT_HITTABLE: InteractionErrorCode.ELEMENT_NOT_HITTABLE,
}

_STATUS_CODES: Dict[str, InteractionErrorCode] = {
    "notFound": InteractionErrorCode.ELEMENT_NOT_FOUND,
    "notHittable": InteractionErrorCode.ELEMENT_NOT_HITTABLE,
    "notEnabled": InteractionErrorCode.ELEMENT_NOT_ENABLED,
    "timeout": InteractionErrorCode.INTERACTION_TIMEOUT,
}


def map_not_hittable_reason_to_code(reason: NotHittableReason) -> InteractionErrorCode:
    try:
        return _REASON_CODES[NotHittableReason(reason)]
    except ValueError:
        return InteractionErrorCode.UNKNOWN_ERROR


def map_action_status_to_code(status: str) -> InteractionErrorCode:
    """``failed``, ``error`` and anything unrecognised map to UNKNOWN_ERROR."""
    return _STATUS_CODES.get(status, InteractionErrorCode.UNKNOWN_ERROR)


@dataclass(frozen=True)
class InteractionError:
    """
    A user-facing interaction failure.

    Attributes:
        code: Error code for programmatic handling
        title: Short title from INTERACTION_ERROR_MESSAGES
        message: Detailed message
        hint: Troubleshooting hint
        suggestions: Alternative elements (element not found)
        suggested_action: Concrete next step
        position: Element frame when relevant
        screenshot_path: Screenshot captured at failure time
        target: The target that failed
    """
    code: InteractionErrorCode
    title: str
    message: str
    hint: str
    suggestions: Optional[List[SuggestedTarget]] = None
    suggested_action: Optional[str] = None
    position: Optional[Frame] = None
    screenshot_path: Optional[str] = None
    target: Optional[Target] = None

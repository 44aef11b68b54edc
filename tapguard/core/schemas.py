from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from tapguard.core.exceptions import InvalidTargetError, SnapshotError


def format_number(value: float) -> str:
    """Render a coordinate the way the inspector prints it (no trailing ``.0``)."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Frame:
    """
    Element bounds in screen points.

    Attributes:
        x: Left edge
        y: Top edge
        width: Width (zero for collapsed elements)
        height: Height (zero for collapsed elements)
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_zero_size(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains_point(self, x: float, y: float) -> bool:
        # Inclusive on every edge
        return (
            self.x <= x <= self.x + self.width
            and self.y <= y <= self.y + self.height
        )

    def intersects_viewport(self, width: float, height: float) -> bool:
        return not (
            self.x + self.width < 0
            or self.x > width
            or self.y + self.height < 0
            or self.y > height
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Any) -> Frame:
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise SnapshotError("Element frame must be an object")
        try:
            return cls(
                x=float(data.get("x", 0)),
                y=float(data.get("y", 0)),
                width=float(data.get("width", 0)),
                height=float(data.get("height", 0)),
            )
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"Element frame is not numeric: {e}") from e


@dataclass(eq=False)
class ElementNode:
    """
    A node in an accessibility tree snapshot.

    Nodes compare by identity: two structurally equal nodes at different
    positions in the tree are different elements.

    Attributes:
        type: Element type name (e.g., "button", "textField", "alert")
        identifier: Accessibility identifier
        label: Accessibility label
        value: Current value (text content, switch state, ...)
        title: Element title
        hint: Accessibility hint
        placeholder: Placeholder text for inputs
        frame: Bounds in screen coordinates
        is_enabled: Whether the element accepts interaction
        is_selected: Whether the element is selected
        is_focused: Whether the element has keyboard focus
        exists: Whether the element is still in the hierarchy
        is_hittable: Whether the platform reports the element as tappable
        is_visible: Whether the element is rendered on screen
        traits: Accessibility traits
        children: Child nodes in traversal order
    """
    type: str
    identifier: Optional[str] = None
    label: Optional[str] = None
    value: Optional[str] = None
    title: Optional[str] = None
    hint: Optional[str] = None
    placeholder: Optional[str] = None
    frame: Frame = field(default_factory=Frame)
    is_enabled: bool = True
    is_selected: bool = False
    is_focused: bool = False
    exists: bool = True
    is_hittable: bool = True
    is_visible: bool = True
    traits: List[str] = field(default_factory=list)
    children: List[ElementNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ElementNode:
        """Build a tree from the inspector's camelCase JSON."""
        root, pending = cls._from_mapping(data)
        stack = [(root, pending)]
        while stack:
            parent, raw_children = stack.pop()
            for raw in raw_children:
                child, grandchildren = cls._from_mapping(raw)
                parent.children.append(child)
                if grandchildren:
                    stack.append((child, grandchildren))
        return root

    @classmethod
    def _from_mapping(cls, data: Any) -> Tuple[ElementNode, List[Any]]:
        """One node with no children yet, plus its raw child list."""
        if not isinstance(data, Mapping):
            raise SnapshotError("Element node must be an object")
        element_type = data.get("type")
        if not isinstance(element_type, str) or not element_type:
            raise SnapshotError("Element node is missing its type")
        children = data.get("children") or []
        if not isinstance(children, list):
            raise SnapshotError("Element children must be a list", context={"type": element_type})
        node = cls(
            type=element_type,
            identifier=_optional_str(data.get("identifier")),
            label=_optional_str(data.get("label")),
            value=_optional_str(data.get("value")),
            title=_optional_str(data.get("title")),
            hint=_optional_str(data.get("hint")),
            placeholder=_optional_str(data.get("placeholderValue", data.get("placeholder"))),
            frame=Frame.from_dict(data.get("frame")),
            is_enabled=bool(data.get("isEnabled", True)),
            is_selected=bool(data.get("isSelected", False)),
            is_focused=bool(data.get("isFocused", False)),
            exists=bool(data.get("exists", True)),
            is_hittable=bool(data.get("isHittable", True)),
            is_visible=bool(data.get("isVisible", True)),
            traits=[str(t) for t in data.get("traits") or []],
        )
        return node, children

    def to_dict(self, include_children: bool = False) -> Dict[str, Any]:
        data = self._own_dict()
        if not include_children:
            return data
        stack = [(self, data)]
        while stack:
            node, out = stack.pop()
            out["children"] = []
            for child in node.children:
                child_data = child._own_dict()
                out["children"].append(child_data)
                stack.append((child, child_data))
        return data

    def _own_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        for key, attr in (
            ("identifier", self.identifier),
            ("label", self.label),
            ("value", self.value),
            ("title", self.title),
            ("hint", self.hint),
            ("placeholderValue", self.placeholder),
        ):
            if attr is not None:
                data[key] = attr
        data.update(
            {
                "frame": self.frame.to_dict(),
                "isEnabled": self.is_enabled,
                "isSelected": self.is_selected,
                "isFocused": self.is_focused,
                "exists": self.exists,
                "isHittable": self.is_hittable,
                "isVisible": self.is_visible,
                "traits": list(self.traits),
            }
        )
        return data


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


class Target:
    """
    A symbolic address for one element.

    Exactly one addressing mode per target; the concrete subclass is the
    mode. ``value`` is always the wire-level string and ``element_type`` is
    an optional hint used only when ranking suggestions.
    """
    kind: ClassVar[str] = ""
    value: str
    element_type: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind, "value": self.value}
        index = getattr(self, "index", None)
        if index is not None:
            data["index"] = index
        if self.element_type:
            data["elementType"] = self.element_type
        return data

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Target:
        if not isinstance(data, Mapping):
            raise InvalidTargetError("Target must be an object")
        kind = data.get("type")
        value = data.get("value")
        if not isinstance(value, str):
            raise InvalidTargetError("Target value must be a string", kind=kind)
        element_type = data.get("elementType", data.get("element_type"))
        if kind == CoordinatesTarget.kind:
            x, y = parse_coordinates(value)
            return CoordinatesTarget(x, y, element_type=element_type)
        if kind == TypeTarget.kind:
            index = data.get("index")
            if index is not None and (isinstance(index, bool) or not isinstance(index, int) or index < 0):
                raise InvalidTargetError("Target index must be a non-negative integer", kind=kind, value=value)
            return TypeTarget(value, index=index, element_type=element_type)
        target_cls = _VALUE_TARGETS.get(kind)
        if target_cls is None:
            raise InvalidTargetError(
                f"Unknown target type: {kind} (expected one of: {', '.join(TARGET_KINDS)})",
                kind=kind,
                value=value,
            )
        return target_cls(value, element_type=element_type)


@dataclass(frozen=True)
class IdentifierTarget(Target):
    value: str
    element_type: Optional[str] = None
    kind: ClassVar[str] = "identifier"


@dataclass(frozen=True)
class LabelTarget(Target):
    value: str
    element_type: Optional[str] = None
    kind: ClassVar[str] = "label"


@dataclass(frozen=True)
class TextTarget(Target):
    """Matches an element's value, label or title."""
    value: str
    element_type: Optional[str] = None
    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class PredicateTarget(Target):
    """A ``field CONTAINS "x"`` or ``field == "x"`` expression."""
    value: str
    element_type: Optional[str] = None
    kind: ClassVar[str] = "predicate"


@dataclass(frozen=True)
class CoordinatesTarget(Target):
    x: float
    y: float
    element_type: Optional[str] = None
    kind: ClassVar[str] = "coordinates"

    @property
    def value(self) -> str:
        return f"{format_number(self.x)},{format_number(self.y)}"


@dataclass(frozen=True)
class TypeTarget(Target):
    """The ``index``-th element (default 0) of a type, in traversal order."""
    value: str
    index: Optional[int] = None
    element_type: Optional[str] = None
    kind: ClassVar[str] = "type"


_VALUE_TARGETS = {
    IdentifierTarget.kind: IdentifierTarget,
    LabelTarget.kind: LabelTarget,
    TextTarget.kind: TextTarget,
    PredicateTarget.kind: PredicateTarget,
}

TARGET_KINDS = (
    IdentifierTarget.kind,
    LabelTarget.kind,
    TextTarget.kind,
    PredicateTarget.kind,
    CoordinatesTarget.kind,
    TypeTarget.kind,
)

_INDEXED_TYPE = re.compile(r"^(?P<name>.+)\[(?P<index>\d+)\]$")


def parse_coordinates(value: str) -> Tuple[float, float]:
    parts = value.split(",")
    if len(parts) != 2:
        raise InvalidTargetError("Coordinates must be in 'x,y' form", kind="coordinates", value=value)
    try:
        x, y = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise InvalidTargetError("Coordinates must be numeric", kind="coordinates", value=value) from e
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidTargetError("Coordinates must be finite", kind="coordinates", value=value)
    return x, y


def parse_target(text: str) -> Target:
    """
    Parse the ``kind:value`` shorthand used on the command line.

    ``#login`` is shorthand for ``identifier:login`` and ``type:button[2]``
    selects the third button.
    """
    text = text.strip()
    if text.startswith("#") and len(text) > 1:
        return IdentifierTarget(text[1:])
    kind, sep, value = text.partition(":")
    if not sep:
        raise InvalidTargetError("Target must look like 'kind:value'", value=text)
    kind = kind.strip().lower()
    if kind == TypeTarget.kind:
        match = _INDEXED_TYPE.match(value)
        if match:
            return TypeTarget(match.group("name"), index=int(match.group("index")))
    return Target.from_dict({"type": kind, "value": value})


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class NotHittableReason(str, Enum):
    NOT_FOUND = "not_found"
    NOT_VISIBLE = "not_visible"
    NOT_ENABLED = "not_enabled"
    ZERO_SIZE = "zero_size"
    OBSCURED = "obscured"
    OFF_SCREEN = "off_screen"
    NOT_HITTABLE = "not_hittable"

    def __str__(self) -> str:
        return self.value


@dataclass
class SuggestedTarget:
    """
    An alternative element offered when a target does not resolve.

    Attributes:
        target: Target that would resolve to ``element``
        element: The candidate element
        similarity: Score 0-100
        reason: Which strategy produced the match
    """
    target: Target
    element: ElementNode
    similarity: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target.to_dict(),
            "element": self.element.to_dict(),
            "similarity": self.similarity,
            "reason": self.reason,
        }


@dataclass
class ValidationResult:
    """
    Verdict of validating a target against a tree.

    Attributes:
        valid: Whether the target can be interacted with
        element: The resolved element, if any
        reason: Why the target is invalid
        message: Human-readable explanation
        suggestions: Alternatives, most similar first (only when not found)
        confidence: 0-100 when an element was resolved
    """
    valid: bool
    element: Optional[ElementNode] = None
    reason: Optional[NotHittableReason] = None
    message: Optional[str] = None
    suggestions: Optional[List[SuggestedTarget]] = None
    confidence: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"valid": self.valid}
        if self.element is not None:
            data["element"] = self.element.to_dict()
        if self.reason is not None:
            data["reason"] = self.reason.value
        if self.message is not None:
            data["message"] = self.message
        if self.suggestions is not None:
            data["suggestions"] = [s.to_dict() for s in self.suggestions]
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data


@dataclass
class HittabilityResult:
    """
    Whether an element can receive a tap.

    Attributes:
        hittable: The verdict
        message: Human-readable explanation
        reason: Failure reason when not hittable
        position: Echo of the element's frame
        suggested_action: Remediation for the caller
    """
    hittable: bool
    message: str
    reason: Optional[NotHittableReason] = None
    position: Optional[Frame] = None
    suggested_action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"hittable": self.hittable, "message": self.message}
        if self.reason is not None:
            data["reason"] = self.reason.value
        if self.position is not None:
            data["position"] = self.position.to_dict()
        if self.suggested_action is not None:
            data["suggestedAction"] = self.suggested_action
        return data


ACTION_STATUSES = ("success", "failed", "timeout", "notFound", "notHittable", "notEnabled", "error")


@dataclass
class ActionResult:
    """
    Outcome of an action reported by the device driver.

    Attributes:
        status: One of ACTION_STATUSES
        error: Driver error text
        screenshot_path: Screenshot captured at failure time
        suggestions: Driver-provided alternative target strings
    """
    status: str
    error: Optional[str] = None
    screenshot_path: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


@dataclass
class ToolResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None

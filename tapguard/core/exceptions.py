"""Custom exception hierarchy for tapguard."""
from __future__ import annotations

from typing import Any, Dict, Optional


class TapguardError(Exception):
    """Base exception for all tapguard errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ConfigurationError(TapguardError):
    """Configuration validation error."""
    pass


class SnapshotError(TapguardError):
    """UI tree snapshot could not be read or is malformed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.source = source
        if source:
            self.context["source"] = source


class InvalidTargetError(TapguardError):
    """A target description could not be parsed."""

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        value: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.kind = kind
        self.value = value
        if kind:
            self.context["kind"] = kind
        if value is not None:
            self.context["value"] = value


class PredicateSyntaxError(InvalidTargetError):
    """Predicate string uses syntax outside the supported grammar."""

    def __init__(
        self,
        message: str,
        predicate: str,
        position: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, kind="predicate", value=predicate, context=context)
        self.predicate = predicate
        self.position = position
        self.context["position"] = position


class InvalidErrorSourceError(TapguardError):
    """An error was requested from a result that did not fail."""
    pass

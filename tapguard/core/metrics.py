from __future__ import annotations

from prometheus_client import Counter, Histogram

validations = Counter(
    "tapguard_validations_total",
    "Target validations by outcome",
    ["outcome"],
)
suggestions_per_lookup = Histogram(
    "tapguard_suggestions_per_lookup",
    "Suggestions returned for an unresolved target",
    buckets=(0, 1, 2, 3, 5, 10),
)


def record_validation(outcome: str) -> None:
    """Count a validation; ``outcome`` is ``valid`` or a failure reason."""
    validations.labels(outcome=outcome).inc()

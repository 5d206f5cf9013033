"""Rule evaluation for composite scores.

A composite score starts from a full-score state and folds an ordered list of
independent rules over it. Each rule inspects a context object, and for every
hit it appends a message to its bucket and subtracts its penalties. Scores are
floored at zero once, after all rules ran.
"""

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class Bucket(str, Enum):
    """Where a rule's message is reported."""

    ISSUE = "issues"
    WARNING = "warnings"
    SUGGESTION = "suggestions"
    RECOMMENDATION = "recommendations"


@dataclass(frozen=True)
class Rule(Generic[T]):
    """A single scoring rule.

    `check` returns the number of hits (a bool counts as 0 or 1). Messages may
    be static or computed from the context.
    """

    name: str
    check: Callable[[T], int | bool]
    bucket: Bucket | None = None
    message: str | Callable[[T], str] | None = None
    penalties: Mapping[str, int] = field(default_factory=dict)

    def render(self, context: T) -> str | None:
        if callable(self.message):
            return self.message(context)
        return self.message


@dataclass
class RuleOutcome:
    """Scores and messages produced by evaluating a rule list."""

    scores: dict[str, int]
    messages: dict[Bucket, list[str]]
    fired: list[str]

    def bucket(self, bucket: Bucket) -> list[str]:
        return self.messages.get(bucket, [])


def evaluate_rules(
    rules: Sequence[Rule[T]],
    context: T,
    initial: Mapping[str, int],
) -> RuleOutcome:
    """Fold rules over a full-score state, flooring scores at zero at the end."""
    scores = dict(initial)
    messages: dict[Bucket, list[str]] = {bucket: [] for bucket in Bucket}
    fired: list[str] = []

    for rule in rules:
        hits = int(rule.check(context))
        if hits <= 0:
            continue

        fired.append(rule.name)
        for _ in range(hits):
            text = rule.render(context)
            if rule.bucket is not None and text:
                messages[rule.bucket].append(text)
            for key, points in rule.penalties.items():
                scores[key] = scores.get(key, 0) - points

    return RuleOutcome(
        scores={key: max(value, 0) for key, value in scores.items()},
        messages=messages,
        fired=fired,
    )


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_rate(value: float) -> float:
    """Round a percentage to one decimal, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

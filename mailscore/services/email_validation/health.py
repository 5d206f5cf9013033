"""Sending health over a trailing window of persisted events."""

import asyncio

from mailscore.core.datetime_utils import get_cutoff
from mailscore.core.logging import get_logger

from .base import EventStore, SubscriberStore
from .errors import StoreUnavailableError
from .models import EmailStatus, HealthMetrics, TimeWindow
from .rules import Rule, evaluate_rules, round_rate

logger = get_logger(__name__)

REPUTATION = "reputation"


def _rate(numerator: int, denominator: int) -> float:
    """Percentage, 0 when the denominator is 0."""
    return (numerator / denominator) * 100 if denominator > 0 else 0.0


# Penalties only apply when something was sent
REPUTATION_RULES: list[Rule[dict[str, float]]] = [
    Rule(name="high_bounce_rate", check=lambda m: m["bounce_rate"] > 5, penalties={REPUTATION: 20}),
    Rule(name="spam_complaints", check=lambda m: m["spam"] > 0, penalties={REPUTATION: 30}),
    Rule(
        name="low_delivered_rate",
        check=lambda m: m["total"] > 0 and m["delivered_rate"] < 90,
        penalties={REPUTATION: 15},
    ),
    Rule(
        name="low_open_rate",
        check=lambda m: m["total"] > 0 and m["open_rate"] < 20,
        penalties={REPUTATION: 10},
    ),
]


class HealthMetricsAggregator:
    """Computes delivery, engagement and reputation figures. Never cached."""

    def __init__(self, event_store: EventStore, subscriber_store: SubscriberStore) -> None:
        self.event_store = event_store
        self.subscriber_store = subscriber_store

    async def get_health_metrics(
        self, window: TimeWindow | str = TimeWindow.THIRTY_DAYS
    ) -> HealthMetrics:
        """
        Aggregate health metrics for the trailing window.

        Args:
            window: 7d, 30d or 90d. Any other value raises ValueError.

        Raises:
            StoreUnavailableError: if a store query fails
        """
        window = TimeWindow(window)
        since = get_cutoff(days=window.days)

        try:
            total, delivered, opened, clicked, bounced, spam, unsubscribes = await asyncio.gather(
                self.event_store.count_sent(since),
                self.event_store.count_sent(since, EmailStatus.DELIVERED),
                self.event_store.count_sent(since, EmailStatus.OPENED),
                self.event_store.count_sent(since, EmailStatus.CLICKED),
                self.event_store.count_sent(since, EmailStatus.BOUNCED),
                self.event_store.count_sent(since, EmailStatus.SPAM),
                self.subscriber_store.count_unsubscribed(since),
            )
        except Exception as e:
            logger.bind(window=window.value, error=str(e)).error("health_metrics_query_failed")
            raise StoreUnavailableError(f"Could not load health metrics: {e}") from e

        delivered_rate = _rate(delivered, total)
        open_rate = _rate(opened, delivered)
        click_rate = _rate(clicked, delivered)
        bounce_rate = _rate(bounced, total)

        outcome = evaluate_rules(
            REPUTATION_RULES,
            {
                "total": total,
                "spam": spam,
                "delivered_rate": delivered_rate,
                "open_rate": open_rate,
                "bounce_rate": bounce_rate,
            },
            {REPUTATION: 100},
        )
        logger.bind(window=window.value, total=total, fired=outcome.fired).debug(
            "health_rules_evaluated"
        )

        return HealthMetrics(
            total_emails=total,
            delivered_rate=round_rate(delivered_rate),
            open_rate=round_rate(open_rate),
            click_rate=round_rate(click_rate),
            bounce_rate=round_rate(bounce_rate),
            spam_complaints=spam,
            unsubscribes=unsubscribes,
            reputation_score=outcome.scores[REPUTATION],
        )

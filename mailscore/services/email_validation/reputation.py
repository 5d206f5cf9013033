"""Domain reputation oracles."""

from collections.abc import Mapping
from datetime import datetime, timedelta

import aiohttp

from mailscore.core.datetime_utils import utc_now
from mailscore.core.logging import get_logger

from .base import ReputationOracle
from .errors import ReputationLookupError

logger = get_logger(__name__)

# Sample scores for common mailbox providers; override via config.yml
DEFAULT_DOMAIN_SCORES: dict[str, float] = {
    "gmail.com": 95,
    "yahoo.com": 90,
    "hotmail.com": 85,
    "outlook.com": 88,
    "aol.com": 82,
}
DEFAULT_UNKNOWN_SCORE = 70


class StaticReputationOracle(ReputationOracle):
    """Lookup-table oracle. Unknown domains get the default score."""

    provider_name = "static"

    def __init__(
        self,
        scores: Mapping[str, float] | None = None,
        default_score: float = DEFAULT_UNKNOWN_SCORE,
    ) -> None:
        table = DEFAULT_DOMAIN_SCORES if scores is None else scores
        self.scores = {domain.lower(): float(score) for domain, score in table.items()}
        self.default_score = float(default_score)

    async def score_domain(self, domain: str) -> float:
        return self.scores.get(domain.lower(), self.default_score)


class HttpReputationOracle(ReputationOracle):
    """
    Oracle backed by a remote reputation service.

    Expects `GET {base_url}/domains/{domain}` to answer `{"score": <0-100>}`.
    Failures raise ReputationLookupError; callers decide how to degrade.
    """

    provider_name = "http"

    def __init__(self, base_url: str, api_key: str = "", timeout_seconds: int = 10) -> None:
        """
        Initialize HTTP oracle.

        Args:
            base_url: Service root URL
            api_key: Bearer token, sent when non-empty
            timeout_seconds: HTTP request timeout
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def score_domain(self, domain: str) -> float:
        try:
            async with aiohttp.ClientSession(
                timeout=self.timeout, headers=self._headers()
            ) as session:
                async with session.get(f"{self.base_url}/domains/{domain}") as response:
                    if response.status != 200:
                        logger.bind(domain=domain, status=response.status).error(
                            "reputation_lookup_bad_status"
                        )
                        raise ReputationLookupError(
                            f"Reputation service returned {response.status} for {domain}"
                        )
                    data = await response.json()
        except TimeoutError as e:
            logger.bind(domain=domain).warning("reputation_lookup_timeout")
            raise ReputationLookupError(f"Reputation lookup timed out for {domain}") from e
        except aiohttp.ClientError as e:
            logger.bind(domain=domain, error=str(e)).error("reputation_client_error")
            raise ReputationLookupError(f"Reputation lookup failed for {domain}: {e}") from e

        score = data.get("score") if isinstance(data, dict) else None
        if not isinstance(score, int | float):
            raise ReputationLookupError(f"Reputation service returned no score for {domain}")
        return max(0.0, min(float(score), 100.0))


class CachedReputationOracle(ReputationOracle):
    """
    Decorator that caches domain scores to reduce lookups.

    Failed lookups are not cached.
    """

    def __init__(self, oracle: ReputationOracle, cache_ttl_hours: int = 24) -> None:
        """
        Initialize cached oracle.

        Args:
            oracle: The underlying oracle to wrap
            cache_ttl_hours: How long to keep a score
        """
        self._oracle = oracle
        self._cache: dict[str, tuple[float, datetime]] = {}
        self._ttl = timedelta(hours=cache_ttl_hours)

    @property
    def provider_name(self) -> str:  # type: ignore[override]
        """Return combined provider name."""
        return f"cached:{self._oracle.provider_name}"

    async def score_domain(self, domain: str) -> float:
        cache_key = domain.lower().strip()

        cached = self._get_cached(cache_key)
        if cached is not None:
            return cached

        score = await self._oracle.score_domain(domain)
        self._evict_expired()
        self._cache[cache_key] = (score, utc_now())
        return score

    def _get_cached(self, cache_key: str) -> float | None:
        """Get cached score if not expired."""
        cached = self._cache.get(cache_key)
        if cached:
            score, cached_at = cached
            if utc_now() - cached_at < self._ttl:
                return score
            # Expired - remove from cache
            del self._cache[cache_key]
        return None

    def _evict_expired(self) -> None:
        """Drop every expired entry."""
        now = utc_now()
        expired = [
            key for key, (_, cached_at) in self._cache.items() if now - cached_at >= self._ttl
        ]
        for key in expired:
            del self._cache[key]

    def clear_cache(self) -> None:
        """Clear all cached scores."""
        self._cache.clear()

    def cache_size(self) -> int:
        """Return current cache size."""
        return len(self._cache)

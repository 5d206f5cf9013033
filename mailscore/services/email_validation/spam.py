"""Lexical spam heuristics for subject and body.

This is a consistency heuristic, not a classifier. Points accumulate and the
result is clamped to 0-10:

- +1 per distinct lexicon term present (case-insensitive)
- +2 if more than 30% of letters are uppercase
- +1 if the text has more than 3 exclamation marks
- +1 per link-shortener domain present
"""

from collections.abc import Iterable

MAX_SPAM_SCORE = 10
CAPS_RATIO_THRESHOLD = 0.3
CAPS_PENALTY = 2
EXCLAMATION_THRESHOLD = 3

# Illustrative samples; override via config.yml
DEFAULT_SPAM_LEXICON = (
    "free",
    "money",
    "cash",
    "winner",
    "prize",
    "lottery",
    "viagra",
    "casino",
    "click here",
    "buy now",
    "limited time",
    "act now",
    "urgent",
    "exclusive",
)

DEFAULT_SHORTENER_DOMAINS = ("bit.ly", "tinyurl.com", "goo.gl")


def caps_ratio(text: str) -> float:
    """Share of uppercase letters among all letters (0 when there are none)."""
    letters = [c for c in text if c.isalpha()]
    if not letters:
        return 0.0
    return sum(1 for c in letters if c.isupper()) / len(letters)


class SpamScorer:
    """Scores subject + body against a configurable lexicon."""

    def __init__(
        self,
        lexicon: Iterable[str] | None = None,
        shortener_domains: Iterable[str] | None = None,
    ) -> None:
        terms = DEFAULT_SPAM_LEXICON if lexicon is None else lexicon
        shorteners = DEFAULT_SHORTENER_DOMAINS if shortener_domains is None else shortener_domains
        # Distinct, lower-cased, order preserved
        self.lexicon = tuple(dict.fromkeys(t.lower() for t in terms if t))
        self.shortener_domains = tuple(dict.fromkeys(d.lower() for d in shorteners if d))

    def score(self, subject: str | None, html_content: str | None) -> int:
        """Return the spam score in [0, 10]."""
        raw = f"{subject or ''} {html_content or ''}"
        content = raw.lower()

        points = sum(1 for term in self.lexicon if term in content)

        if caps_ratio(raw) > CAPS_RATIO_THRESHOLD:
            points += CAPS_PENALTY

        if content.count("!") > EXCLAMATION_THRESHOLD:
            points += 1

        points += sum(1 for domain in self.shortener_domains if domain in content)

        return max(0, min(points, MAX_SPAM_SCORE))


_default_scorer = SpamScorer()


def spam_score(subject: str | None, html_content: str | None) -> int:
    """Score with the built-in lexicon and shortener list."""
    return _default_scorer.score(subject, html_content)

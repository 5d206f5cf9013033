"""List hygiene: partition raw addresses into disjoint buckets.

Single pass, case-insensitive. Duplicate detection runs before the format and
disposable checks, so a malformed repeat is counted once as a duplicate.
"""

from collections.abc import Iterable
from pathlib import Path

from .format import extract_domain, is_valid_format
from .models import ListValidationReport, ListValidationResult, normalize_address
from .rules import round_rate


def _load_disposable_domains() -> frozenset[str]:
    """Load disposable domains from file into a frozenset for O(1) lookup."""
    domains_file = Path(__file__).parent / "disposable_domains.txt"
    if not domains_file.exists():
        return frozenset()

    domains = set()
    with open(domains_file) as f:
        for line in f:
            line = line.strip().lower()
            # Skip comments and empty lines
            if line and not line.startswith("#"):
                domains.add(line)
    return frozenset(domains)


# Load disposable domains once at module import
DISPOSABLE_DOMAINS = _load_disposable_domains()


class ListHygieneValidator:
    """Validates an address list against format, duplicates and disposable domains."""

    def __init__(self, disposable_domains: Iterable[str] | None = None) -> None:
        if disposable_domains is None:
            self.disposable_domains = DISPOSABLE_DOMAINS
        else:
            self.disposable_domains = frozenset(d.strip().lower() for d in disposable_domains)

    def is_disposable(self, address: str) -> bool:
        return extract_domain(address) in self.disposable_domains

    def validate(self, addresses: Iterable[str]) -> ListValidationResult:
        """Bucket every input address exactly once."""
        result = ListValidationResult(
            report=ListValidationReport(
                total=0, valid=0, invalid=0, duplicates=0, disposable=0, validity_rate=0.0
            )
        )
        seen: set[str] = set()
        total = 0

        for raw in addresses:
            total += 1
            address = normalize_address(raw)

            if address in seen:
                result.duplicates.append(address)
                continue
            seen.add(address)

            if not is_valid_format(address):
                result.invalid.append(address)
            elif self.is_disposable(address):
                result.disposable.append(address)
            else:
                result.valid.append(address)

        validity_rate = (len(result.valid) / total) * 100 if total > 0 else 0.0
        result.report = ListValidationReport(
            total=total,
            valid=len(result.valid),
            invalid=len(result.invalid),
            duplicates=len(result.duplicates),
            disposable=len(result.disposable),
            validity_rate=round_rate(validity_rate),
        )
        return result

"""Stay pricing.

The total is the nightly rate times the number of nights. Add-ons (extra
bedding, deep clean) are carried through as flags and are not priced here;
amounts are integral currency units with no rounding.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceQuote:
    """Price breakdown for a stay."""

    nightly_rate: int
    nights: int
    total: int
    extra_bedding: bool = False
    deep_clean: bool = False


def total(nightly_rate: int, nights: int) -> int:
    """Total cost of a stay."""
    return nightly_rate * nights


def quote(
    nightly_rate: int,
    nights: int,
    extra_bedding: bool = False,
    deep_clean: bool = False,
) -> PriceQuote:
    """Build a price breakdown, passing add-on flags through unchanged."""
    return PriceQuote(
        nightly_rate=nightly_rate,
        nights=nights,
        total=total(nightly_rate, nights),
        extra_bedding=extra_bedding,
        deep_clean=deep_clean,
    )

"""Integer minor-unit money helpers and FX normalization"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Protocol, Set, Tuple

# Graceful degradation: a pair the rate source did not return converts 1:1
MISSING_RATE_FALLBACK = 1.0

# convert() rounds the exact decimal product half up: 50 @ 0.29 is 15, where the
# float product 14.499999999999998 would round to 14

RatePair = Tuple[str, str]


class FxRateProvider(Protocol):
    """Batched exchange-rate source injected into the services"""

    async def get_rate_batch(self, pairs: List[RatePair]) -> Dict[str, float]:
        ...


def rate_key(from_currency: str, to_currency: str) -> str:
    return f"{from_currency}_{to_currency}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 rounds up"""
    return int(math.floor(value + 0.5))


def convert(amount: int, rate: float) -> int:
    """Magnitude of amount in the target currency, in minor units"""
    converted = Decimal(abs(amount)) * Decimal(str(rate))
    return int(converted.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def convert_signed(amount: int, rate: float) -> int:
    """Like convert(), but keeps the sign of the input amount"""
    converted = convert(amount, rate)
    return -converted if amount < 0 else converted


def rate_pairs(currencies: Iterable[str], target_currency: str) -> List[RatePair]:
    """Distinct (from, to) pairs for a set of source currencies, sorted for stable requests"""
    distinct: Set[str] = set(currencies)
    return [(currency, target_currency) for currency in sorted(distinct)]


def missing_pairs(rates: Dict[str, float], pairs: Iterable[RatePair]) -> List[str]:
    """Keys of cross-currency pairs the batch result did not cover"""
    return [
        rate_key(from_currency, to_currency)
        for from_currency, to_currency in pairs
        if from_currency != to_currency and rate_key(from_currency, to_currency) not in rates
    ]


def resolve_rate(rates: Dict[str, float], from_currency: str, to_currency: str) -> float:
    """
    Look up a rate from a batch result.

    Same-currency pairs are always 1.0; a pair missing from the batch falls back
    to MISSING_RATE_FALLBACK (callers report those via missing_pairs()).
    """
    if from_currency == to_currency:
        return 1.0
    return rates.get(rate_key(from_currency, to_currency), MISSING_RATE_FALLBACK)

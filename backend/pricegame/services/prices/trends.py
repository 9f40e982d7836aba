from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Iterator, Optional

HIGHER = 'higher'
LOWER = 'lower'
UNDECIDABLE = 'undecidable'


@dataclass(frozen=True)
class TrendFact:
    window_start: datetime
    direction: str


def truncate_to_minute(ts: datetime) -> datetime:
    return ts.replace(second=0, microsecond=0)


def _as_decimal(price) -> Decimal:
    if isinstance(price, Decimal):
        return price
    # str() first so floats keep their shortest repr instead of binary noise
    return Decimal(str(price))


def compare_prices(prev_price, curr_price) -> str:
    prev_price = _as_decimal(prev_price)
    curr_price = _as_decimal(curr_price)
    if curr_price > prev_price:
        return HIGHER
    if curr_price < prev_price:
        return LOWER
    return UNDECIDABLE


def derive_trends(samples: Iterable) -> Iterator[TrendFact]:
    """Yield one TrendFact per consecutive pair of price samples.

    ``samples`` must be ordered by timestamp and expose ``timestamp`` and
    ``price``. Each fact is anchored at the earlier sample's timestamp
    truncated to the minute, so a guess placed during minute M is judged by
    the move from the sample taken in M to the next one. The first sample has
    no predecessor and yields nothing on its own.
    """
    prev = None
    for curr in samples:
        if prev is not None:
            yield TrendFact(
                window_start=truncate_to_minute(prev.timestamp),
                direction=compare_prices(prev.price, curr.price),
            )
        prev = curr


def index_by_window(facts: Iterable[TrendFact]) -> dict:
    """Map window_start -> TrendFact, keeping the earliest fact per minute."""
    index = {}
    for fact in facts:
        index.setdefault(fact.window_start, fact)
    return index


def trend_for(index: dict, ts: datetime) -> Optional[TrendFact]:
    return index.get(truncate_to_minute(ts))

from typing import NamedTuple

from pricegame.models import Guess, PriceSample
from pricegame.services.prices.trends import UNDECIDABLE, derive_trends, index_by_window, trend_for


class ScoreCard(NamedTuple):
    wins: int
    losses: int
    ignored: int

    @property
    def score(self) -> int:
        return self.wins - self.losses


def score_card_for(player_uid: str) -> ScoreCard:
    """Judge every guess of a player against the trend of its anchor minute.

    Nothing about correctness is persisted: the trend facts are derived from
    the full price series on each call, so the result always reflects the
    current contents of both tables. Guesses whose minute has no trend yet,
    or whose trend is undecidable, count as neither win nor loss.
    """
    trends = index_by_window(derive_trends(PriceSample.ordered().yield_per(500)))
    wins = losses = ignored = 0
    for guess in Guess.for_player(player_uid).all():
        fact = trend_for(trends, guess.timestamp)
        if fact is None or fact.direction == UNDECIDABLE:
            ignored += 1
        elif fact.direction == guess.direction:
            wins += 1
        else:
            losses += 1
    return ScoreCard(wins, losses, ignored)


def score_for(player_uid: str) -> int:
    return score_card_for(player_uid).score

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from tabletop.cards import Card, Rank

logger = logging.getLogger(__name__)

HAND_SIZE = 5
WHEEL = {Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE}


class PokerRank(Enum):
    ROYAL_FLUSH = "Royal Flush"
    STRAIGHT_FLUSH = "Straight Flush"
    FOUR_OF_A_KIND = "Four of a Kind"
    FULL_HOUSE = "Full House"
    FLUSH = "Flush"
    STRAIGHT = "Straight"
    THREE_OF_A_KIND = "Three of a Kind"
    TWO_PAIR = "Two Pair"
    ONE_PAIR = "One Pair"
    HIGH_CARD = "High Card"
    NO_RANK = "No Rank"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PokerHandResult:
    rank: PokerRank
    cards: tuple[Card, ...]

    @property
    def category(self) -> str:
        return self.rank.value

    def __str__(self) -> str:
        return self.category


def _is_flush(cards: tuple[Card, ...]) -> bool:
    return len(set(c.suit for c in cards)) == 1


def _is_sequential(ranks: list[Rank]) -> bool:
    # ranks are sorted ascending; duplicates break the run
    if all(b - a == 1 for a, b in zip(ranks, ranks[1:])):
        return True
    return set(ranks) == WHEEL and len(ranks) == HAND_SIZE


def _high_card(ranks: list[Rank]) -> Rank:
    if set(ranks) == WHEEL:
        return Rank.FIVE  # ace plays low
    return ranks[-1]


def classify_poker_hand(cards: Iterable[Card]) -> PokerHandResult:
    cards = tuple(cards)
    if len(cards) != HAND_SIZE:
        logger.debug("Hand of %d cards has no rank", len(cards))
        return PokerHandResult(PokerRank.NO_RANK, cards)

    ranks = sorted(c.rank for c in cards)
    counts = Counter(ranks).values()

    flush = _is_flush(cards)
    sequential = _is_sequential(ranks)
    three_of_a_kind = any(n >= 3 for n in counts)
    four_of_a_kind = any(n == 4 for n in counts)
    full_house = 3 in counts and 2 in counts
    two_pair = sum(1 for n in counts if n == 2) == 2
    one_pair = 2 in counts
    royal_flush = flush and sequential and _high_card(ranks) == Rank.ACE
    straight_flush = flush and sequential and not royal_flush
    straight = sequential and not flush

    if royal_flush:
        rank = PokerRank.ROYAL_FLUSH
    elif straight_flush:
        rank = PokerRank.STRAIGHT_FLUSH
    elif four_of_a_kind:
        rank = PokerRank.FOUR_OF_A_KIND
    elif full_house:
        rank = PokerRank.FULL_HOUSE
    elif flush:
        rank = PokerRank.FLUSH
    elif straight:
        rank = PokerRank.STRAIGHT
    elif three_of_a_kind:
        rank = PokerRank.THREE_OF_A_KIND
    elif two_pair:
        rank = PokerRank.TWO_PAIR
    elif one_pair:
        rank = PokerRank.ONE_PAIR
    else:
        rank = PokerRank.HIGH_CARD

    logger.debug("%s -> %s", " ".join(str(c) for c in cards), rank)
    return PokerHandResult(rank, cards)

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from tabletop.dice import Die, DiePip

logger = logging.getLogger(__name__)

CUP_SIZE = 5

SMALL_STRAIGHTS = [
    {1, 2, 3, 4},
    {2, 3, 4, 5},
    {3, 4, 5, 6},
]
LARGE_STRAIGHTS = [
    {1, 2, 3, 4, 5},
    {2, 3, 4, 5, 6},
]

FULL_HOUSE_SCORE = 25
SMALL_STRAIGHT_SCORE = 30
LARGE_STRAIGHT_SCORE = 40
YAHTZEE_SCORE = 50


class YahtzeeCombination(Enum):
    YAHTZEE = "Yahtzee"
    LARGE_STRAIGHT = "Large Straight"
    SMALL_STRAIGHT = "Small Straight"
    FULL_HOUSE = "Full House"
    FOUR_OF_A_KIND = "Four of a Kind"
    THREE_OF_A_KIND = "Three of a Kind"
    SIXES = "Sixes"
    FIVES = "Fives"
    FOURS = "Fours"
    THREES = "Threes"
    TWOS = "Twos"
    ONES = "Ones"
    CHANCE = "Chance"
    NO_COMBINATION = "No Combination"

    def __str__(self) -> str:
        return self.value


# number categories in the order they are tried
NUMBER_CATEGORIES = [
    (YahtzeeCombination.SIXES, DiePip.SIX),
    (YahtzeeCombination.FIVES, DiePip.FIVE),
    (YahtzeeCombination.FOURS, DiePip.FOUR),
    (YahtzeeCombination.THREES, DiePip.THREE),
    (YahtzeeCombination.TWOS, DiePip.TWO),
    (YahtzeeCombination.ONES, DiePip.ONE),
]
NUMBER_PIPS = dict(NUMBER_CATEGORIES)


@dataclass(frozen=True)
class YahtzeeResult:
    combination: YahtzeeCombination
    dice: tuple[Die, ...]

    @property
    def score(self) -> int:
        return score_yahtzee(self)

    @property
    def pips(self) -> list[int]:
        return [d.value for d in self.dice]

    def __str__(self) -> str:
        return f"{self.combination} ({self.score})"


def _as_die(value: Union[Die, int]) -> Die:
    return value if isinstance(value, Die) else Die(value)


def classify_yahtzee_roll(dice: Iterable[Union[Die, int]]) -> YahtzeeResult:
    dice = tuple(_as_die(d) for d in dice)
    if len(dice) != CUP_SIZE:
        logger.debug("Cup of %d dice has no combination", len(dice))
        return YahtzeeResult(YahtzeeCombination.NO_COMBINATION, dice)

    pips = [d.value for d in dice]
    distinct = set(pips)
    counts = Counter(pips).values()

    yahtzee = 5 in counts
    large_straight = any(s <= distinct for s in LARGE_STRAIGHTS)
    small_straight = any(s <= distinct for s in SMALL_STRAIGHTS)
    full_house = 3 in counts and 2 in counts
    four_of_a_kind = 4 in counts
    three_of_a_kind = any(n >= 3 for n in counts)

    if yahtzee:
        combination = YahtzeeCombination.YAHTZEE
    elif large_straight:
        combination = YahtzeeCombination.LARGE_STRAIGHT
    elif small_straight:
        combination = YahtzeeCombination.SMALL_STRAIGHT
    elif full_house:
        combination = YahtzeeCombination.FULL_HOUSE
    elif four_of_a_kind:
        combination = YahtzeeCombination.FOUR_OF_A_KIND
    elif three_of_a_kind:
        combination = YahtzeeCombination.THREE_OF_A_KIND
    else:
        combination = next(
            (category for category, pip in NUMBER_CATEGORIES if pip in distinct),
            YahtzeeCombination.CHANCE,
        )

    logger.debug("%s -> %s", pips, combination)
    return YahtzeeResult(combination, dice)


def score_yahtzee(result: YahtzeeResult) -> int:
    combination = result.combination
    pips = result.pips

    if combination in NUMBER_PIPS:
        pip = NUMBER_PIPS[combination]
        return sum(p for p in pips if p == pip)
    if combination in (YahtzeeCombination.THREE_OF_A_KIND,
                       YahtzeeCombination.FOUR_OF_A_KIND,
                       YahtzeeCombination.CHANCE):
        return sum(pips)
    if combination == YahtzeeCombination.FULL_HOUSE:
        return FULL_HOUSE_SCORE
    if combination == YahtzeeCombination.SMALL_STRAIGHT:
        return SMALL_STRAIGHT_SCORE
    if combination == YahtzeeCombination.LARGE_STRAIGHT:
        return LARGE_STRAIGHT_SCORE
    if combination == YahtzeeCombination.YAHTZEE:
        return YAHTZEE_SCORE
    return 0

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from tabletop.cards import Card, Deck, parse_card
from tabletop.dice import Cup, Die
from tabletop.poker import HAND_SIZE, PokerRank, classify_poker_hand
from tabletop.yahtzee import CUP_SIZE, YahtzeeCombination, classify_yahtzee_roll

logger = logging.getLogger(__name__)

_cache: dict[tuple[Path, int], "Fixtures"] = {}


@dataclass(frozen=True)
class PokerFixture:
    cards: tuple[Card, ...]
    rank: PokerRank

    def to_dict(self) -> dict:
        return {"cards": [str(c) for c in self.cards], "category": self.rank.value}


@dataclass(frozen=True)
class YahtzeeFixture:
    dice: tuple[Die, ...]
    combination: YahtzeeCombination
    score: int

    def to_dict(self) -> dict:
        return {
            "dice": [d.value for d in self.dice],
            "combination": self.combination.value,
            "score": self.score,
        }


@dataclass(frozen=True)
class Fixtures:
    poker: tuple[PokerFixture, ...] = ()
    yahtzee: tuple[YahtzeeFixture, ...] = ()

    def to_dict(self) -> dict:
        return {
            "poker": [f.to_dict() for f in self.poker],
            "yahtzee": [f.to_dict() for f in self.yahtzee],
        }


def generate_fixtures(rng: Optional[random.Random] = None, poker: int = 10,
                      yahtzee: int = 10) -> Fixtures:
    rng = rng or random.Random()

    poker_fixtures = []
    deck = Deck.create().shuffle(rng)
    for _ in range(poker):
        if len(deck) < HAND_SIZE:
            deck = Deck.create().shuffle(rng)
        cards, deck = deck.deal(HAND_SIZE)
        result = classify_poker_hand(cards)
        poker_fixtures.append(PokerFixture(result.cards, result.rank))

    yahtzee_fixtures = []
    cup = Cup.roll(CUP_SIZE, rng)
    for _ in range(yahtzee):
        result = classify_yahtzee_roll(cup)
        yahtzee_fixtures.append(YahtzeeFixture(result.dice, result.combination, result.score))
        cup = cup.shake(rng)

    return Fixtures(tuple(poker_fixtures), tuple(yahtzee_fixtures))


def dump_fixtures(path: Union[str, Path], fixtures: Fixtures) -> Path:
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(fixtures.to_dict(), f, indent=2, ensure_ascii=False)
    resolved = path.resolve()
    for key in [k for k in _cache if k[0] == resolved]:
        del _cache[key]
    logger.debug("Wrote %d poker and %d yahtzee fixtures to %s",
                 len(fixtures.poker), len(fixtures.yahtzee), path)
    return path


def _enum_by_value(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        raise ValueError(f"Unknown {enum_type.__name__}: {value!r}") from None


def _record(record, kind: str, field: str) -> list:
    if not isinstance(record, dict):
        raise ValueError(f"{kind} fixture must be an object, got {record!r}")
    try:
        values = record[field]
    except KeyError as e:
        raise ValueError(f"{kind} fixture missing field {e}") from None
    if not isinstance(values, list):
        raise ValueError(f"{kind} fixture {field!r} must be a list, got {values!r}")
    return values


def _parse_poker(record) -> PokerFixture:
    cards = _record(record, "Poker", "cards")
    try:
        parsed = tuple(parse_card(c) for c in cards)
        category = record["category"]
    except KeyError as e:
        raise ValueError(f"Poker fixture missing field {e}") from None
    except (TypeError, AttributeError):
        raise ValueError(f"Poker fixture cards must be strings, got {cards!r}") from None
    return PokerFixture(parsed, _enum_by_value(PokerRank, category))


def _parse_yahtzee(record) -> YahtzeeFixture:
    dice = _record(record, "Yahtzee", "dice")
    try:
        parsed = tuple(Die(p) for p in dice)
        combination = record["combination"]
        score = record["score"]
    except KeyError as e:
        raise ValueError(f"Yahtzee fixture missing field {e}") from None
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Yahtzee fixture score must be an integer, got {score!r}")
    return YahtzeeFixture(parsed, _enum_by_value(YahtzeeCombination, combination), score)


def _records(data: dict, section: str) -> list:
    records = data.get(section, [])
    if not isinstance(records, list):
        raise ValueError(f"Fixture section {section!r} must be a list, got {records!r}")
    return records


def load_fixtures(path: Union[str, Path]) -> Fixtures:
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise ValueError(f"No fixture file at: {path}")
    # a rewrite changes the mtime and misses the cache
    key = (resolved, resolved.stat().st_mtime_ns)
    if key in _cache:
        return _cache[key]
    with open(resolved, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Fixture file must hold a JSON object: {path}")
    fixtures = Fixtures(
        tuple(_parse_poker(r) for r in _records(data, "poker")),
        tuple(_parse_yahtzee(r) for r in _records(data, "yahtzee")),
    )
    logger.debug("Loaded %d poker and %d yahtzee fixtures from %s",
                 len(fixtures.poker), len(fixtures.yahtzee), path)
    _cache[key] = fixtures
    return fixtures


def clear_cache() -> None:
    _cache.clear()


def check_fixtures(fixtures: Fixtures) -> list[str]:
    """Re-classify every fixture and describe each disagreement."""
    mismatches = []
    for f in fixtures.poker:
        result = classify_poker_hand(f.cards)
        if result.rank != f.rank:
            hand = " ".join(str(c) for c in f.cards)
            mismatches.append(f"{hand}: expected {f.rank}, got {result.rank}")
    for f in fixtures.yahtzee:
        result = classify_yahtzee_roll(f.dice)
        if result.combination != f.combination or result.score != f.score:
            mismatches.append(
                f"{[d.value for d in f.dice]}: expected {f.combination} ({f.score}), "
                f"got {result.combination} ({result.score})"
            )
    return mismatches


import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterable, Optional

from tabletop.errors import InvalidSymbolValue


class Suit(IntEnum):
    # spades highest
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


RANKS = "23456789TJQKA"
SUITS = "cdhs"
RANK_SYMBOLS = {rank: symbol for rank, symbol in zip(Rank, RANKS)}
SUIT_LETTERS = {suit: letter for suit, letter in zip(Suit, SUITS)}
SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


def _coerce(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidSymbolValue(f"Invalid {enum_type.__name__.lower()}: {value!r}") from None


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    def __post_init__(self):
        object.__setattr__(self, "suit", _coerce(Suit, self.suit))
        object.__setattr__(self, "rank", _coerce(Rank, self.rank))

    def __str__(self) -> str:
        return f"{RANK_SYMBOLS[self.rank]}{SUIT_LETTERS[self.suit]}"

    def __repr__(self) -> str:
        return f"Card('{self}')"

    def pretty(self) -> str:
        return f"{RANK_SYMBOLS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    def __lt__(self, other: "Card") -> bool:
        return self.rank < other.rank


def parse_card(notation: str) -> Card:
    notation = notation.strip()
    if len(notation) != 2:
        raise InvalidSymbolValue(f"Invalid card notation: {notation!r}")
    rank, suit = notation[0].upper(), notation[1].lower()
    if rank not in RANKS or suit not in SUITS:
        raise InvalidSymbolValue(f"Invalid card notation: {notation!r}")
    return Card(Suit(SUITS.index(suit)), Rank(RANKS.index(rank) + 2))


def parse_cards(notation: str) -> list[Card]:
    notation = notation.strip().replace(" ", "").replace(",", "")
    if len(notation) % 2 != 0:
        raise InvalidSymbolValue(f"Invalid hand notation: {notation!r}")
    return [parse_card(notation[i:i+2]) for i in range(0, len(notation), 2)]


@dataclass(frozen=True)
class Deck:
    """An immutable pile of cards; the last card is the top of the deck.

    Every operation returns a new deck and leaves the receiver untouched.
    """
    cards: tuple[Card, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "cards", tuple(self.cards))

    @classmethod
    def create(cls) -> "Deck":
        return cls(tuple(Card(s, r) for s in Suit for r in Rank))

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)

    def __str__(self) -> str:
        rows = [self.cards[i:i+13] for i in range(0, len(self.cards), 13)]
        return "\n".join(" ".join(f"{c.pretty():<4}" for c in row).rstrip() for row in rows)

    def shuffle(self, rng: Optional[random.Random] = None) -> "Deck":
        if not self.cards:
            return self
        rng = rng or random.Random()
        cards = list(self.cards)
        rng.shuffle(cards)
        return Deck(cards)

    def sort(self, key: Callable[[Card], object] = lambda c: (c.suit, c.rank),
             reverse: bool = False) -> "Deck":
        if not self.cards:
            return self
        return Deck(sorted(self.cards, key=key, reverse=reverse))

    def keep(self, predicate: Callable[[Card], bool]) -> "Deck":
        if not self.cards:
            return self
        return Deck(c for c in self.cards if predicate(c))

    def remove(self, predicate: Callable[[Card], bool]) -> "Deck":
        if not self.cards:
            return self
        return Deck(c for c in self.cards if not predicate(c))

    def draw(self) -> tuple[Card, "Deck"]:
        if not self.cards:
            raise ValueError("Cannot draw from an empty deck")
        return self.cards[-1], Deck(self.cards[:-1])

    def deal(self, n: int = 1) -> tuple[list[Card], "Deck"]:
        if n < 0:
            raise ValueError(f"Cannot deal {n} cards")
        if n > len(self.cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self.cards)} remaining")
        split = len(self.cards) - n
        dealt = list(reversed(self.cards[split:]))
        return dealt, Deck(self.cards[:split])

    def add_to_top(self, cards: Card | Iterable[Card]) -> "Deck":
        if isinstance(cards, Card):
            cards = (cards,)
        return Deck(self.cards + tuple(cards))

    def add_to_bottom(self, cards: Card | Iterable[Card]) -> "Deck":
        if isinstance(cards, Card):
            cards = (cards,)
        return Deck(tuple(cards) + self.cards)

    def add_deck(self, other: "Deck") -> "Deck":
        return Deck(self.cards + other.cards)

    def remove_duplicates(self) -> "Deck":
        return Deck(dict.fromkeys(self.cards))

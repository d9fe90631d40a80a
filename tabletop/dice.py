import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

from tabletop.errors import InvalidSymbolValue


class DiePip(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6


@dataclass(frozen=True)
class Die:
    pip: DiePip

    def __post_init__(self):
        if isinstance(self.pip, bool) or not isinstance(self.pip, int):
            raise InvalidSymbolValue(f"Die value must be an integer, got {self.pip!r}")
        if not DiePip.ONE <= self.pip <= DiePip.SIX:
            raise InvalidSymbolValue(f"Die value must be between 1 and 6, got {self.pip}")
        object.__setattr__(self, "pip", DiePip(self.pip))

    @property
    def value(self) -> int:
        return int(self.pip)

    def __str__(self) -> str:
        return str(self.value)


def _roll_die(rng: random.Random) -> Die:
    return Die(rng.randint(int(DiePip.ONE), int(DiePip.SIX)))


@dataclass(frozen=True)
class Cup:
    dice: tuple[Die, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "dice", tuple(self.dice))

    @classmethod
    def of(cls, *pips: int) -> "Cup":
        return cls(Die(p) for p in pips)

    @classmethod
    def roll(cls, n: int = 5, rng: Optional[random.Random] = None) -> "Cup":
        if n < 0:
            raise ValueError("Number of dice must be non-negative")
        rng = rng or random.Random()
        return cls(_roll_die(rng) for _ in range(n))

    def __len__(self) -> int:
        return len(self.dice)

    def __iter__(self):
        return iter(self.dice)

    def __str__(self) -> str:
        return " ".join(str(d) for d in self.dice)

    @property
    def pips(self) -> list[int]:
        return [d.value for d in self.dice]

    def shake(self, rng: Optional[random.Random] = None) -> "Cup":
        if not self.dice:
            return self
        rng = rng or random.Random()
        return Cup(_roll_die(rng) for _ in self.dice)

    def reroll(self, indices: Iterable[int], rng: Optional[random.Random] = None) -> "Cup":
        rng = rng or random.Random()
        positions = set(indices)
        for i in positions:
            if not 0 <= i < len(self.dice):
                raise IndexError(f"No die at position {i}")
        return Cup(_roll_die(rng) if i in positions else d for i, d in enumerate(self.dice))

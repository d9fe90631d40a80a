from tabletop.cards import Card, Deck, Rank, Suit, parse_card, parse_cards
from tabletop.dice import Cup, Die, DiePip
from tabletop.errors import InvalidSymbolValue
from tabletop.poker import PokerHandResult, PokerRank, classify_poker_hand
from tabletop.yahtzee import (
    YahtzeeCombination, YahtzeeResult, classify_yahtzee_roll, score_yahtzee,
)

__version__ = "1.0.0"

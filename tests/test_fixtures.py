import json
import os
import random

import pytest
from tabletop.cards import parse_cards
from tabletop.dice import Die
from tabletop.errors import InvalidSymbolValue
from tabletop.fixtures import (
    Fixtures, PokerFixture, YahtzeeFixture,
    check_fixtures, clear_cache, dump_fixtures, generate_fixtures, load_fixtures,
)
from tabletop.poker import PokerRank
from tabletop.yahtzee import YahtzeeCombination


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_cache()
    yield
    clear_cache()


class TestGenerateFixtures:
    def test_counts(self):
        f = generate_fixtures(random.Random(1), poker=3, yahtzee=4)
        assert len(f.poker) == 3
        assert len(f.yahtzee) == 4

    def test_reshuffles_when_deck_runs_out(self):
        f = generate_fixtures(random.Random(1), poker=25, yahtzee=0)
        assert len(f.poker) == 25
        assert all(len(p.cards) == 5 for p in f.poker)

    def test_seeded_is_reproducible(self):
        assert generate_fixtures(random.Random(8)) == generate_fixtures(random.Random(8))

    def test_generated_fixtures_agree(self):
        assert check_fixtures(generate_fixtures(random.Random(3), poker=50, yahtzee=50)) == []


class TestDumpAndLoad:
    def test_json_layout(self, tmp_path):
        fixtures = Fixtures(
            poker=(PokerFixture(tuple(parse_cards("Ts Js Qs Ks As")), PokerRank.ROYAL_FLUSH),),
            yahtzee=(YahtzeeFixture(tuple(Die(6) for _ in range(5)), YahtzeeCombination.YAHTZEE, 50),),
        )
        path = dump_fixtures(tmp_path / "hands.json", fixtures)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["poker"] == [{"cards": ["Ts", "Js", "Qs", "Ks", "As"], "category": "Royal Flush"}]
        assert data["yahtzee"] == [{"dice": [6, 6, 6, 6, 6], "combination": "Yahtzee", "score": 50}]

    def test_load_matches_dump(self, tmp_path):
        generated = generate_fixtures(random.Random(11), poker=5, yahtzee=5)
        path = dump_fixtures(tmp_path / "hands.json", generated)
        assert load_fixtures(path) == generated

    def test_load_is_cached(self, tmp_path):
        path = dump_fixtures(tmp_path / "hands.json", generate_fixtures(random.Random(2)))
        assert load_fixtures(path) is load_fixtures(str(path))

    def test_dump_invalidates_cache(self, tmp_path):
        path = tmp_path / "hands.json"
        dump_fixtures(path, generate_fixtures(random.Random(2), poker=1, yahtzee=1))
        load_fixtures(path)
        dump_fixtures(path, generate_fixtures(random.Random(2), poker=2, yahtzee=2))
        assert len(load_fixtures(path).poker) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError):
            load_fixtures(tmp_path / "nope.json")

    def test_bad_card(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"poker": [{"cards": ["Zz"], "category": "No Rank"}]}))
        with pytest.raises(InvalidSymbolValue):
            load_fixtures(path)

    def test_bad_pip(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"yahtzee": [{"dice": [7], "combination": "Chance", "score": 7}]}))
        with pytest.raises(InvalidSymbolValue):
            load_fixtures(path)

    def test_unknown_category(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"poker": [{"cards": ["As"], "category": "Five Aces"}]}))
        with pytest.raises(ValueError):
            load_fixtures(path)

    def test_rewritten_file_is_reloaded(self, tmp_path):
        path = dump_fixtures(tmp_path / "hands.json", generate_fixtures(random.Random(2), poker=1, yahtzee=1))
        assert len(load_fixtures(path).poker) == 1
        path.write_text(json.dumps({"poker": [], "yahtzee": []}))
        stat = path.stat()
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))
        assert load_fixtures(path).poker == ()

    def test_missing_field(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"yahtzee": [{"dice": [1, 2, 3, 4, 5]}]}))
        with pytest.raises(ValueError):
            load_fixtures(path)


class TestCheckFixtures:
    def test_reports_mismatch(self):
        wrong = Fixtures(
            poker=(PokerFixture(tuple(parse_cards("2c 2d 2h 9s 9c")), PokerRank.FLUSH),),
            yahtzee=(YahtzeeFixture(tuple(Die(p) for p in (1, 2, 3, 4, 5)), YahtzeeCombination.LARGE_STRAIGHT, 30),),
        )
        mismatches = check_fixtures(wrong)
        assert len(mismatches) == 2
        assert "expected Flush, got Full House" in mismatches[0]
        assert "Large Straight (30)" in mismatches[1]


class TestMalformedDocuments:
    @pytest.mark.parametrize("document", [
        [],
        {"poker": {"cards": ["As"]}},
        {"poker": [["As", "Ks", "Qs", "Js", "Ts"]]},
        {"poker": [{"cards": "AsKsQsJsTs", "category": "Royal Flush"}]},
        {"poker": [{"cards": ["As", 5, "Qs", "Js", "Ts"], "category": "High Card"}]},
        {"yahtzee": [{"dice": None, "combination": "Chance", "score": 0}]},
        {"yahtzee": [[6, 6, 6, 6, 6]]},
        {"yahtzee": [{"dice": [6, 6, 6, 6, 6], "combination": "Yahtzee", "score": True}]},
    ])
    def test_raises_value_error(self, tmp_path, document):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(document))
        with pytest.raises(ValueError):
            load_fixtures(path)

    def test_null_pip_is_invalid_symbol(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"yahtzee": [{"dice": [None], "combination": "Chance", "score": 0}]}))
        with pytest.raises(InvalidSymbolValue):
            load_fixtures(path)

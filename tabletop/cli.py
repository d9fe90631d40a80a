import logging
import random
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from tabletop.cards import Deck, parse_card
from tabletop.dice import Cup, Die
from tabletop.errors import InvalidSymbolValue
from tabletop.fixtures import check_fixtures, dump_fixtures, generate_fixtures, load_fixtures
from tabletop.poker import HAND_SIZE, classify_poker_hand
from tabletop.yahtzee import CUP_SIZE, classify_yahtzee_roll

logger = logging.getLogger(__name__)

console = Console()

seed_option = click.option("--seed", type=int, default=None, envvar="TABLETOP_SEED",
                           help="Seed for shuffling and rolling (env: TABLETOP_SEED)")


def _rng(seed):
    return random.Random(seed)


def _poker_table(rows) -> Table:
    table = Table(title="Poker hands")
    table.add_column("#", justify="right")
    table.add_column("Cards")
    table.add_column("Category", style="bold")
    for i, result in enumerate(rows, 1):
        table.add_row(str(i), " ".join(c.pretty() for c in result.cards), result.category)
    return table


def _yahtzee_table(rows) -> Table:
    table = Table(title="Yahtzee rolls")
    table.add_column("#", justify="right")
    table.add_column("Dice")
    table.add_column("Combination", style="bold")
    table.add_column("Score", justify="right")
    for i, result in enumerate(rows, 1):
        table.add_row(str(i), " ".join(str(p) for p in result.pips),
                      str(result.combination), str(result.score))
    return table


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log classification details")
def cli(verbose):
    """Classify poker hands and Yahtzee rolls."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@cli.command()
@seed_option
@click.option("--hands", default=4, type=click.IntRange(1, 52 // HAND_SIZE),
              help="Number of five-card hands to deal")
def poker(seed, hands):
    """Deal hands from a shuffled deck and classify them."""
    deck = Deck.create().shuffle(_rng(seed))
    results = []
    for _ in range(hands):
        cards, deck = deck.deal(HAND_SIZE)
        results.append(classify_poker_hand(cards))
    logger.debug("%d cards left in deck", len(deck))
    console.print(_poker_table(results))


@cli.command()
@seed_option
@click.option("--rolls", default=10, type=click.IntRange(min=1),
              help="Number of times to shake the cup")
def yahtzee(seed, rolls):
    """Roll a cup of five dice repeatedly and score each roll."""
    rng = _rng(seed)
    cup = Cup.roll(CUP_SIZE, rng)
    results = []
    for i in range(rolls):
        if i:
            cup = cup.shake(rng)
        results.append(classify_yahtzee_roll(cup))
    logger.debug("Last roll: %s", cup)
    console.print(_yahtzee_table(results))


@cli.command("classify-cards")
@click.argument("cards", nargs=-1, required=True)
def classify_cards(cards):
    """Classify explicit cards, e.g. As Ks Qs Js Ts."""
    try:
        parsed = [parse_card(c) for c in cards]
    except InvalidSymbolValue as e:
        raise click.BadParameter(str(e), param_hint="CARDS")
    console.print(_poker_table([classify_poker_hand(parsed)]))


@cli.command("classify-dice")
@click.argument("pips", nargs=-1, required=True, type=int)
def classify_dice(pips):
    """Classify and score explicit dice, e.g. 6 6 6 6 6."""
    try:
        dice = [Die(p) for p in pips]
    except InvalidSymbolValue as e:
        raise click.BadParameter(str(e), param_hint="PIPS")
    console.print(_yahtzee_table([classify_yahtzee_roll(dice)]))


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
@seed_option
@click.option("--poker", "poker_count", default=10, type=click.IntRange(min=0),
              help="Number of poker hands")
@click.option("--yahtzee", "yahtzee_count", default=10, type=click.IntRange(min=0),
              help="Number of Yahtzee rolls")
def fixtures(path, seed, poker_count, yahtzee_count):
    """Write generated and classified hands to a JSON file."""
    generated = generate_fixtures(_rng(seed), poker=poker_count, yahtzee=yahtzee_count)
    dump_fixtures(path, generated)
    click.echo(f"Wrote {poker_count} poker hands and {yahtzee_count} Yahtzee rolls to {path}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def check(path):
    """Re-classify a fixture file and report any disagreement."""
    try:
        loaded = load_fixtures(path)
    except ValueError as e:
        raise click.ClickException(str(e))
    mismatches = check_fixtures(loaded)
    for line in mismatches:
        click.echo(line, err=True)
    total = len(loaded.poker) + len(loaded.yahtzee)
    if mismatches:
        click.echo(f"{len(mismatches)} of {total} fixtures disagree", err=True)
        sys.exit(1)
    click.echo(f"All {total} fixtures agree")


def main():
    cli()


if __name__ == "__main__":
    main()

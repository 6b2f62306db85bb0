# reelsync/domain/machine/services/victory_evaluation.py
import logging
from typing import Hashable, Iterable, List, Sequence

from ..entities.spin_outcome import SpinOutcome


def find_common_symbols(sequences: Sequence[Iterable[Hashable]]) -> List[Hashable]:
    """
    Find the symbol identifiers present in every sequence.

    Each sequence is treated as a set, so duplicates within one reel count
    once. The reduction stops as soon as the running intersection is empty.

    Args:
        sequences: One sequence of visible symbol identifiers per reel

    Returns:
        Common identifiers in order of first appearance in the first
        sequence; empty when there are no sequences or nothing is shared
    """
    if not sequences:
        return []

    # dict keeps insertion order, unlike set
    common = dict.fromkeys(sequences[0])

    for symbols in sequences[1:]:
        current = set(symbols)
        common = {symbol: None for symbol in common if symbol in current}

        if not common:
            return []

    return list(common)


class VictoryEvaluator:
    """
    Turns the settled reels' visible symbols into a SpinOutcome.
    Holds no state between evaluations.
    """
    def __init__(self):
        self.logger = logging.getLogger("domain.machine.victory_evaluator")

    def evaluate(self, reel_symbols: Sequence[Sequence[Hashable]]) -> SpinOutcome:
        """
        Evaluate one set of settled reels.

        Args:
            reel_symbols: Visible symbol identifiers, indexed like the reels

        Returns:
            VICTORY outcome with the common symbols, or NO_MATCH
        """
        common_symbols = find_common_symbols(reel_symbols)

        if common_symbols:
            outcome = SpinOutcome.victory(common_symbols, reel_symbols)
        else:
            outcome = SpinOutcome.no_match(reel_symbols)

        self.logger.debug(f"Evaluated {len(reel_symbols)} reels {list(reel_symbols)}: {outcome}")
        return outcome

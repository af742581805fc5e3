"""Monte-Carlo Tree Search over complete plays.

Each tree edge is a full play for one roll. The root's children are every
distinct play for the dice already rolled; deeper levels are expanded lazily
with a fresh roll for the side to move at that node.
"""

import logging
import random
import time
from collections.abc import Sequence
from dataclasses import dataclass

from backgammon.config import Settings
from backgammon.schemas.game_engine import Play
from backgammon.services.game.engine.board import winning_side
from backgammon.services.game.engine.legal_moves import get_all_plays
from backgammon.services.game.engine.rolling import roll_dice

from .rollout import random_playout
from .tree import ROOT, SearchTree

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Counters describing the last search."""

    iterations: int = 0
    expansions: int = 0
    capped_rollouts: int = 0
    nodes: int = 0
    root_children: int = 0
    elapsed: float = 0.0


class MCTSEngine:
    """Selects a play with UCT-guided Monte-Carlo Tree Search.

    The engine never touches a live game: it copies the board it is given and
    returns the chosen play as plain Move values.
    """

    def __init__(
        self,
        iterations: int = 2000,
        exploration: float = 1.4,
        max_rollout_plies: int = 400,
        time_limit: float | None = None,
        rng: random.Random | None = None,
    ):
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        self.iterations = iterations
        self.exploration = exploration
        self.max_rollout_plies = max_rollout_plies
        self.time_limit = time_limit
        self._rng = rng or random.Random()
        self.last_stats = SearchStats()

    @classmethod
    def from_settings(cls, settings: Settings, rng: random.Random | None = None) -> "MCTSEngine":
        return cls(
            iterations=settings.MCTS_ITERATIONS,
            exploration=settings.MCTS_EXPLORATION,
            max_rollout_plies=settings.ROLLOUT_MAX_PLIES,
            time_limit=settings.SEARCH_TIME_LIMIT,
            rng=rng,
        )

    def search(self, board: Sequence[int], direction: int, dice: Sequence[int]) -> Play:
        """Return the most promising play for direction with the given dice.

        Args:
            board: Board to search from; a private copy is used.
            direction: Side to move.
            dice: Dice already rolled for this turn.

        Returns:
            The play of the most visited root child. An empty play means
            nothing can be played.
        """
        started = time.monotonic()
        stats = SearchStats()
        self.last_stats = stats

        tree = SearchTree(list(board), direction)
        plays = get_all_plays(tree.root.board, direction, list(dice))
        tree.expand(ROOT, plays)
        stats.root_children = len(plays)

        logger.info(
            "Search started: direction=%d, dice=%s, root_children=%d, iterations=%d",
            direction,
            list(dice),
            len(plays),
            self.iterations,
        )

        # A forced play (or no play at all) needs no simulation
        if len(plays) == 1:
            stats.nodes = len(tree)
            stats.elapsed = time.monotonic() - started
            logger.info("Search skipped: single play %s", _format_play(plays[0]))
            return plays[0]

        for _ in range(self.iterations):
            if self.time_limit is not None and time.monotonic() - started > self.time_limit:
                logger.warning(
                    "Search time limit reached: %.1fs after %d iterations",
                    self.time_limit,
                    stats.iterations,
                )
                break
            self._simulate(tree, stats)
            stats.iterations += 1

        best = tree.most_visited_child(ROOT)
        best_node = tree.nodes[best]
        stats.nodes = len(tree)
        stats.elapsed = time.monotonic() - started

        logger.info(
            "Search finished: play=%s, visits=%d, win_rate=%.3f, iterations=%d, nodes=%d, elapsed=%.2fs",
            _format_play(best_node.moves),
            best_node.visits,
            best_node.win_rate,
            stats.iterations,
            stats.nodes,
            stats.elapsed,
        )
        return best_node.moves

    def _simulate(self, tree: SearchTree, stats: SearchStats) -> None:
        """Run one selection / expansion / rollout / backpropagation pass."""
        index = ROOT

        while True:
            node = tree.nodes[index]

            winner = winning_side(node.board)
            if winner is not None:
                break

            if node.is_expanded:
                index = tree.select_child(index, self.exploration)
                continue

            if node.visits == 0:
                winner = random_playout(
                    node.board, node.to_move, self._rng, self.max_rollout_plies
                )
                if winner is None:
                    stats.capped_rollouts += 1
                break

            # Second visit of a leaf: grow it by one level and descend
            dice = roll_dice(self._rng)
            tree.expand(index, get_all_plays(node.board, node.to_move, dice))
            stats.expansions += 1
            index = tree.select_child(index, self.exploration)

        tree.backpropagate(index, winner)


def _format_play(play: Play) -> str:
    if not play:
        return "pass"
    return " ".join(f"{move.start}/{move.end}" for move in play)

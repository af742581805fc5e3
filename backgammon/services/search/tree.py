"""Search tree for MCTS, stored as a flat arena of nodes.

Nodes refer to their parent and children by index into SearchTree.nodes, so
the tree holds no reference cycles and a subtree can be handed around as a
plain integer.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from backgammon.schemas.game_engine import Play
from backgammon.services.game.engine.board import apply_play

logger = logging.getLogger(__name__)

ROOT = 0

# Score of a child that was never visited; above any reachable UCT value
UNVISITED_SCORE = 1e6


@dataclass
class Node:
    """A board reached by playing `moves` from the parent's board.

    `mover` is the side that played `moves`; wins are counted from its point
    of view.
    """

    moves: Play
    mover: int
    board: tuple[int, ...]
    parent: int | None = None
    visits: int = 0
    wins: int = 0
    children: list[int] | None = None

    @property
    def is_expanded(self) -> bool:
        return self.children is not None

    @property
    def to_move(self) -> int:
        return -self.mover

    @property
    def win_rate(self) -> float:
        if self.visits == 0:
            return 0.0
        return self.wins / self.visits


class SearchTree:
    """Arena of search nodes rooted at the position being searched."""

    def __init__(self, board: Sequence[int], direction: int):
        # The root was reached by the opponent's last play
        self.nodes: list[Node] = [Node(moves=(), mover=-direction, board=tuple(board))]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> Node:
        return self.nodes[ROOT]

    def add_child(self, parent: int, moves: Play) -> int:
        """Create the node reached by playing moves from parent and return its index."""
        parent_node = self.nodes[parent]
        child = Node(
            moves=moves,
            mover=parent_node.to_move,
            board=tuple(apply_play(parent_node.board, moves)),
            parent=parent,
        )
        self.nodes.append(child)
        index = len(self.nodes) - 1

        if parent_node.children is None:
            parent_node.children = []
        parent_node.children.append(index)
        return index

    def expand(self, index: int, plays: Sequence[Play]) -> list[int]:
        """Materialize one child per play and return their indices."""
        node = self.nodes[index]
        if node.is_expanded:
            return list(node.children or [])

        node.children = []
        children = [self.add_child(index, play) for play in plays]
        logger.debug("Expanded node %d: children=%d", index, len(children))
        return children

    def uct_score(self, parent: int, child: int, exploration: float) -> float:
        """Win rate of the child plus its exploration bonus."""
        child_node = self.nodes[child]
        if child_node.visits == 0:
            return UNVISITED_SCORE

        parent_visits = max(self.nodes[parent].visits, 1)
        return child_node.win_rate + exploration * math.sqrt(
            math.log(parent_visits) / child_node.visits
        )

    def select_child(self, index: int, exploration: float) -> int:
        """Pick the child with the highest UCT score; ties go to the first child."""
        children = self.nodes[index].children
        if not children:
            raise ValueError(f"Node {index} has no children to select from")

        best = children[0]
        best_score = self.uct_score(index, best, exploration)
        for child in children[1:]:
            score = self.uct_score(index, child, exploration)
            if score > best_score:
                best = child
                best_score = score
        return best

    def most_visited_child(self, index: int = ROOT) -> int:
        children = self.nodes[index].children
        if not children:
            raise ValueError(f"Node {index} has no children")
        return max(children, key=lambda child: self.nodes[child].visits)

    def path_to_root(self, index: int) -> list[int]:
        path = []
        current: int | None = index
        while current is not None:
            path.append(current)
            current = self.nodes[current].parent
        return path

    def backpropagate(self, index: int, winner: int | None) -> None:
        """Record one simulation on every node from index up to the root.

        A node gains a win when the simulation was won by its mover. Movers
        alternate level by level, so the credit flips sign along the path.
        Capped simulations (winner None) count as a visit only.
        """
        for node_index in self.path_to_root(index):
            node = self.nodes[node_index]
            node.visits += 1
            if winner is not None and winner == node.mover:
                node.wins += 1

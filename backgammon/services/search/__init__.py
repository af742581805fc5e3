"""Search service module.

Provides:
- Arena-based search tree (tree.py)
- Random playouts (rollout.py)
- The MCTS engine (mcts.py)
- Asynchronous submission of searches (orchestrator.py)
"""

from .mcts import MCTSEngine, SearchStats
from .orchestrator import (
    SearchCallback,
    SearchOrchestrator,
    SearchOutcome,
    SearchResult,
    SearchSnapshot,
)
from .rollout import play_random_die, random_playout
from .tree import ROOT, UNVISITED_SCORE, Node, SearchTree

__all__ = [
    # Engine
    "MCTSEngine",
    "SearchStats",
    # Orchestration
    "SearchOrchestrator",
    "SearchCallback",
    "SearchOutcome",
    "SearchResult",
    "SearchSnapshot",
    # Tree
    "ROOT",
    "UNVISITED_SCORE",
    "Node",
    "SearchTree",
    # Rollouts
    "random_playout",
    "play_random_die",
]

"""Tests for asynchronous search submission.

Critical scenarios tested:
- Results are delivered to the callback with the submitted snapshot
- Engine failures become ERROR results instead of propagating
- Submissions run one at a time
"""

import asyncio
import random
import threading
import time

from backgammon.schemas.game_engine import Move
from backgammon.services.search import (
    MCTSEngine,
    SearchOrchestrator,
    SearchOutcome,
    SearchResult,
    SearchSnapshot,
)

from .conftest import BLACK, DANCE_PLACEMENTS, FORCED_PLACEMENTS, WHITE, create_board


class FailingEngine(MCTSEngine):
    def search(self, board, direction, dice):
        raise RuntimeError("boom")


class SlowEngine(MCTSEngine):
    """Engine that records how many searches overlap."""

    def __init__(self):
        super().__init__(iterations=1)
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()

    def search(self, board, direction, dice):
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(0.02)
        with self._guard:
            self.active -= 1
        return (Move(start=10, end=13),)


class TestSearchResult:
    def test_empty_play_is_no_move(self):
        """An empty play becomes NO_MOVE."""
        result = SearchResult.ok(())
        assert result.outcome == SearchOutcome.NO_MOVE
        assert result.move is None

    def test_play_is_move_found(self):
        """A non-empty play becomes MOVE_FOUND."""
        result = SearchResult.ok((Move(start=1, end=7), Move(start=7, end=12)))
        assert result.outcome == SearchOutcome.MOVE_FOUND
        assert result.move == Move(start=1, end=7)

    def test_failure(self):
        """A failure keeps its message and carries no moves."""
        result = SearchResult.failure("engine crashed")
        assert result.outcome == SearchOutcome.ERROR
        assert result.error_message == "engine crashed"
        assert result.moves == ()


class TestSubmit:
    """Test submissions to the orchestrator."""

    def test_move_found_delivered_to_callback(self):
        """The callback gets the result and the snapshot it was computed for."""
        delivered: list[tuple[SearchSnapshot, SearchResult]] = []
        orchestrator = SearchOrchestrator(
            MCTSEngine(iterations=1, rng=random.Random(1)),
            callback=lambda snapshot, result: delivered.append((snapshot, result)),
        )
        board = create_board(FORCED_PLACEMENTS)

        result = asyncio.run(orchestrator.submit(board, BLACK, [3, 1]))

        assert result.outcome == SearchOutcome.MOVE_FOUND
        assert result.moves == (Move(start=10, end=13),)
        assert len(delivered) == 1
        snapshot, delivered_result = delivered[0]
        assert delivered_result is result
        assert snapshot == SearchSnapshot(board=tuple(board), direction=1, dice=(3, 1))

    def test_no_move(self):
        """A position with no play reports NO_MOVE."""
        orchestrator = SearchOrchestrator(MCTSEngine(iterations=1, rng=random.Random(1)))
        result = asyncio.run(
            orchestrator.submit(create_board(DANCE_PLACEMENTS), BLACK, [6, 5])
        )
        assert result.outcome == SearchOutcome.NO_MOVE
        assert result.moves == ()

    def test_engine_error_becomes_result(self):
        """An engine exception turns into an ERROR result."""
        delivered = []
        orchestrator = SearchOrchestrator(FailingEngine(), callback=lambda s, r: delivered.append(r))

        result = asyncio.run(orchestrator.submit(create_board(FORCED_PLACEMENTS), BLACK, [3, 1]))

        assert result.outcome == SearchOutcome.ERROR
        assert result.error_message == "boom"
        assert delivered == [result]

    def test_snapshot_is_isolated_from_caller(self):
        """Mutating the caller's board after submitting doesn't reach the search."""
        seen = []

        class RecordingEngine(MCTSEngine):
            def search(self, board, direction, dice):
                seen.append(list(board))
                return ()

        orchestrator = SearchOrchestrator(RecordingEngine(iterations=1))
        board = create_board(FORCED_PLACEMENTS)

        async def submit_and_mutate():
            task = asyncio.create_task(orchestrator.submit(board, BLACK, [3, 1]))
            await asyncio.sleep(0)
            board[10] = 0
            return await task

        result = asyncio.run(submit_and_mutate())

        assert seen == [create_board(FORCED_PLACEMENTS)]
        assert result.outcome == SearchOutcome.NO_MOVE

    def test_register_callback(self):
        """A callback registered later receives results."""
        delivered = []
        orchestrator = SearchOrchestrator(MCTSEngine(iterations=1, rng=random.Random(1)))
        orchestrator.register_callback(lambda s, r: delivered.append(s.direction))

        asyncio.run(orchestrator.submit(create_board(FORCED_PLACEMENTS), BLACK, [3, 1]))
        assert delivered == [1]

    def test_submissions_are_serialized(self):
        """Concurrent submissions never search at the same time."""
        engine = SlowEngine()
        orchestrator = SearchOrchestrator(engine)
        board = create_board(FORCED_PLACEMENTS)

        async def submit_many():
            return await asyncio.gather(
                *(orchestrator.submit(board, side, [3, 1]) for side in (BLACK, WHITE, BLACK))
            )

        results = asyncio.run(submit_many())

        assert len(results) == 3
        assert all(r.outcome == SearchOutcome.MOVE_FOUND for r in results)
        assert engine.max_active == 1

import asyncio
import logging

from backgammon.config import get_settings
from backgammon.schemas.game_engine import GameStatus, PlayerAttributes, PlayerType, Side
from backgammon.services.game.session import GameSession

logger = logging.getLogger(__name__)


async def play_self_game(session: GameSession) -> GameStatus:
    """Let two computer players finish a game and return its final status."""
    logger.info("Starting self-play game")
    await session.tick()

    status = session.game.state
    logger.info(
        "Self-play game finished: status=%s, turns=%d, borne_off white=%d black=%d",
        status.value,
        session.game.history_depth,
        session.game.borne_off_count(Side.WHITE),
        session.game.borne_off_count(Side.BLACK),
    )
    return status


def main() -> None:
    settings = get_settings()
    logger.debug("Random seed: %s", settings.RANDOM_SEED)

    session = GameSession(
        players=[
            PlayerAttributes(name="White", side=Side.WHITE, player_type=PlayerType.COMPUTER),
            PlayerAttributes(name="Black", side=Side.BLACK, player_type=PlayerType.COMPUTER),
        ],
        settings=settings,
    )
    asyncio.run(play_self_game(session))


if __name__ == "__main__":
    main()

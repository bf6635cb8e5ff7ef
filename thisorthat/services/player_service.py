import logging
from typing import Tuple

from thisorthat.core.exceptions import PlayerNotFound
from thisorthat.schemas.records import PlayerRecord
from thisorthat.services.game_service import game_service_obj
from thisorthat.services.repository import GameRepository
from thisorthat.services.validators import GameValidator

logger = logging.getLogger(__name__)


class PlayerService:
    def __init__(self):
        self.validator = GameValidator()

    def join_game(self, repo: GameRepository, slug: str, first_name,
                  last_name) -> Tuple[PlayerRecord, bool]:
        """
        Resolve a player by exact name pair, creating one on first join.

        Returns the player and whether it was created. Matching is exact
        string equality after trimming, so this is best-effort de-duplication
        rather than an identity guarantee.
        """
        first, last = self.validator.validate_player_names(first_name, last_name)
        game = game_service_obj.get_game_by_slug(repo, slug)

        existing = repo.find_player_by_names(game.id, first, last)
        if existing:
            return existing, False

        player = repo.insert_player(game.id, first, last)
        logger.info(f"Created player {player.id} in game {game.id}")
        return player, True

    def get_player(self, repo: GameRepository, game_id: str, player_id: str) -> PlayerRecord:
        player = repo.fetch_player(game_id, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found in game {game_id}")
        return player


player_service_obj = PlayerService()

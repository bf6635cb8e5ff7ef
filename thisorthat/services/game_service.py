import logging
from typing import List

from thisorthat.core.config import settings
from thisorthat.core.exceptions import GameNotFound, NotGameOwner, SlugTaken
from thisorthat.schemas.game import ShareLinks
from thisorthat.schemas.records import GameRecord
from thisorthat.services.repository import GameRepository
from thisorthat.services.validators import GameValidator

logger = logging.getLogger(__name__)


def build_share_links(slug: str, site_url: str = None) -> ShareLinks:
    """Public links for a game; the play link doubles as the QR code payload."""
    base = (site_url or settings.SITE_URL).rstrip("/")
    return ShareLinks(
        play=f"{base}/g/{slug}",
        leaderboard=f"{base}/g/{slug}/leaderboard",
        admin=f"{base}/admin/g/{slug}"
    )


class GameService:
    def __init__(self):
        self.validator = GameValidator()

    def create_game(self, repo: GameRepository, owner_id: str, data: dict) -> GameRecord:
        fields = self.validator.validate_new_game(data)

        # Check-then-insert; the unique index on slug backs this up
        if repo.slug_exists(fields["slug"]):
            raise SlugTaken("Slug already exists")

        game = repo.insert_game(created_by=owner_id, **fields)
        logger.info(f"Game '{game.slug}' created by {owner_id}")
        return game

    def list_games(self, repo: GameRepository, owner_id: str) -> List[GameRecord]:
        return repo.list_games_for_owner(owner_id)

    def get_game(self, repo: GameRepository, game_id: str) -> GameRecord:
        game = repo.fetch_game(game_id)
        if not game:
            raise GameNotFound(f"Game {game_id} not found")
        return game

    def get_game_by_slug(self, repo: GameRepository, slug: str) -> GameRecord:
        game = repo.fetch_game_by_slug(slug)
        if not game:
            raise GameNotFound(f"Game '{slug}' not found")
        return game

    def get_owned_game(self, repo: GameRepository, game_id: str, user_id: str) -> GameRecord:
        game = self.get_game(repo, game_id)
        if game.created_by != user_id:
            raise NotGameOwner(f"Only the creator of game {game_id} can manage it")
        return game

    def update_game(self, repo: GameRepository, game_id: str, user_id: str,
                    changes: dict) -> GameRecord:
        game = self.get_owned_game(repo, game_id, user_id)
        fields = self.validator.validate_game_update(game, changes)
        if not fields:
            return game

        updated = repo.update_game(game_id, **fields)
        if not updated:
            raise GameNotFound(f"Game {game_id} not found")
        logger.info(f"Game {game_id} updated: {sorted(fields)}")
        return updated


game_service_obj = GameService()

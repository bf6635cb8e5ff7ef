import logging
from typing import List

from thisorthat.schemas.leaderboard import LeaderboardEntry, PlayerDetail
from thisorthat.services.game_service import game_service_obj
from thisorthat.services.player_service import player_service_obj
from thisorthat.services.repository import GameRepository
from thisorthat.services.scoring import build_leaderboard, build_player_detail

logger = logging.getLogger(__name__)


class LeaderboardService:

    def get_leaderboard(self, repo: GameRepository, slug: str) -> List[LeaderboardEntry]:
        """Rank every player in the game by number of correct answers."""
        game = game_service_obj.get_game_by_slug(repo, slug)
        questions = repo.list_questions_for_game(game.id)
        players = repo.list_players_for_game(game.id)
        answers = repo.list_answers_for_game(game.id)

        leaderboard = build_leaderboard(questions, players, answers)
        logger.debug(f"Leaderboard for '{slug}': {len(leaderboard)} players, {len(answers)} answers")
        return leaderboard

    def get_player_detail(self, repo: GameRepository, game_id: str, player_id: str,
                          user_id: str) -> PlayerDetail:
        """Admin view of one player's latest answers and tiebreaker distance."""
        game = game_service_obj.get_owned_game(repo, game_id, user_id)
        player = player_service_obj.get_player(repo, game.id, player_id)

        return build_player_detail(
            player,
            repo.list_questions_for_game(game.id),
            repo.list_answers_for_game(game.id),
            game.tiebreaker_enabled,
            game.tiebreaker_answer
        )


leaderboard_service_obj = LeaderboardService()

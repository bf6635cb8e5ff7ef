import logging
from typing import List, Optional

from thisorthat.core.exceptions import GameClosed, ValidationFailed
from thisorthat.core.game_config import TIEBREAKER_KEY
from thisorthat.schemas.answer import AnswerIn
from thisorthat.schemas.player import SavedAnswers
from thisorthat.schemas.records import AnswerRecord
from thisorthat.services.game_service import game_service_obj
from thisorthat.services.player_service import player_service_obj
from thisorthat.services.repository import GameRepository
from thisorthat.services.scoring import latest_answers
from thisorthat.services.validators import GameValidator

logger = logging.getLogger(__name__)


class AnswerService:
    def __init__(self):
        self.validator = GameValidator()

    def submit_answers(self, repo: GameRepository, slug: str, player_id: str,
                       answers: List[AnswerIn], tiebreaker: Optional[str] = None) -> List[AnswerRecord]:
        """
        Record a player's answers as new rows.

        Earlier answers for the same question are left in place; scoring
        reads the newest. Rows are written one by one, so a failure can
        leave a prefix saved (PartialWriteError).
        """
        game = game_service_obj.get_game_by_slug(repo, slug)
        if not game.is_open:
            raise GameClosed(f"Game '{slug}' is closed to new answers")

        player_service_obj.get_player(repo, game.id, player_id)

        if not answers and tiebreaker is None:
            raise ValidationFailed("No answers to submit")

        question_ids = {q.id for q in repo.list_questions_for_game(game.id)}
        rows = []
        for answer in answers:
            if answer.question_id not in question_ids:
                raise ValidationFailed(f"Question {answer.question_id} is not part of this game")
            rows.append({
                "game_id": game.id,
                "player_id": player_id,
                "question_id": answer.question_id,
                "answer_text": self.validator.validate_choice(answer.answer_text)
            })

        if tiebreaker is not None:
            if not game.tiebreaker_enabled:
                raise ValidationFailed("This game has no tiebreaker")
            rows.append({
                "game_id": game.id,
                "player_id": player_id,
                "question_id": None,
                "answer_text": self.validator.validate_tiebreaker_guess(tiebreaker)
            })

        saved = repo.insert_answers(rows)
        logger.info(f"Saved {len(saved)} answers for player {player_id} in game {game.id}")
        return saved

    def saved_answers(self, repo: GameRepository, slug: str, player_id: str) -> SavedAnswers:
        game = game_service_obj.get_game_by_slug(repo, slug)
        player_service_obj.get_player(repo, game.id, player_id)

        slots = latest_answers(repo.list_answers_for_player(game.id, player_id)).get(player_id, {})
        tiebreaker = slots.pop(TIEBREAKER_KEY, None)
        return SavedAnswers(
            player_id=player_id,
            answers={slot: answer.answer_text for slot, answer in slots.items()},
            tiebreaker=tiebreaker.answer_text if tiebreaker else None
        )


answer_service_obj = AnswerService()

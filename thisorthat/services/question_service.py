import logging
from typing import List

from thisorthat.core.exceptions import QuestionNotFound
from thisorthat.schemas.records import QuestionRecord
from thisorthat.services.game_service import game_service_obj
from thisorthat.services.repository import GameRepository
from thisorthat.services.validators import GameValidator

logger = logging.getLogger(__name__)


class QuestionService:
    def __init__(self):
        self.validator = GameValidator()

    def list_questions(self, repo: GameRepository, game_id: str) -> List[QuestionRecord]:
        game_service_obj.get_game(repo, game_id)
        return repo.list_questions_for_game(game_id)

    def add_question(self, repo: GameRepository, game_id: str, user_id: str,
                     prompt, correct_answer) -> QuestionRecord:
        """
        Append a question to a game.

        The order position is max existing + 1 (0 for the first question).
        Two admins adding at the same moment can end up with the same
        position; ordering is display-only so that is tolerated.
        """
        prompt, correct_answer = self.validator.validate_question(prompt, correct_answer)
        game_service_obj.get_owned_game(repo, game_id, user_id)

        current_max = repo.max_order_index(game_id)
        next_index = (current_max if current_max is not None else -1) + 1

        question = repo.insert_question(game_id, prompt, correct_answer, next_index)
        logger.info(f"Question {question.id} added to game {game_id} at position {next_index}")
        return question

    def update_question(self, repo: GameRepository, game_id: str, question_id: str,
                        user_id: str, changes: dict) -> QuestionRecord:
        game_service_obj.get_owned_game(repo, game_id, user_id)
        current = repo.fetch_question(game_id, question_id)
        if not current:
            raise QuestionNotFound(f"Question {question_id} not found in game {game_id}")

        prompt, correct_answer = self.validator.validate_question(
            changes["prompt"] if changes.get("prompt") is not None else current.prompt,
            changes["correct_answer"] if changes.get("correct_answer") is not None else current.correct_answer
        )
        updated = repo.update_question(
            game_id, question_id, prompt=prompt, correct_answer=correct_answer
        )
        if not updated:
            raise QuestionNotFound(f"Question {question_id} not found in game {game_id}")
        return updated


question_service_obj = QuestionService()

"""
Admin-side workflow: create and manage games and their questions.

Forms are validated locally with the same rules the API applies, so an
invalid form never produces a request.
"""
import logging
from typing import List, Optional

from thisorthat.client.auth_session import SessionProvider
from thisorthat.client.http import ApiClient
from thisorthat.core.exceptions import AuthRequired
from thisorthat.schemas.game import GameResponse
from thisorthat.schemas.leaderboard import PlayerDetail
from thisorthat.schemas.records import QuestionRecord
from thisorthat.services.validators import game_validator

logger = logging.getLogger(__name__)


class AdminClient:

    def __init__(self, auth: SessionProvider, api: Optional[ApiClient] = None):
        self.auth = auth
        self.api = api or ApiClient()

    def _token(self) -> str:
        token = self.auth.access_token
        if not token:
            raise AuthRequired("Authentication required, please sign in")
        return token

    def create_game(self, title: str, slug: str, option_a_label: str, option_b_label: str,
                    is_open: bool = True, option_a_emoji: Optional[str] = None,
                    option_b_emoji: Optional[str] = None, tiebreaker_enabled: bool = False,
                    tiebreaker_prompt: Optional[str] = None, tiebreaker_answer=None,
                    theme: str = "default") -> GameResponse:
        form = {
            "title": title,
            "slug": slug.strip().lower() if isinstance(slug, str) else slug,
            "is_open": bool(is_open),
            "option_a_label": option_a_label,
            "option_b_label": option_b_label,
            "option_a_emoji": option_a_emoji,
            "option_b_emoji": option_b_emoji,
            "tiebreaker_enabled": bool(tiebreaker_enabled),
            "tiebreaker_prompt": tiebreaker_prompt,
            "tiebreaker_answer": tiebreaker_answer,
            "theme": theme,
        }
        payload = game_validator.validate_new_game(form)
        created = GameResponse.model_validate(
            self.api.post("/api/admin/games", json=payload, token=self._token())
        )
        logger.info(f"Created game '{created.slug}': {created.links.play if created.links else ''}")
        return created

    def list_games(self) -> List[GameResponse]:
        data = self.api.get("/api/admin/games", token=self._token())
        return [GameResponse.model_validate(g) for g in data]

    def update_game(self, game_id: str, **changes) -> GameResponse:
        return GameResponse.model_validate(
            self.api.patch(f"/api/admin/games/{game_id}", json=changes, token=self._token())
        )

    def list_questions(self, game_id: str) -> List[QuestionRecord]:
        data = self.api.get(f"/api/admin/games/{game_id}/questions")
        return [QuestionRecord.model_validate(q) for q in data]

    def add_question(self, game_id: str, prompt: str, correct_answer: str) -> QuestionRecord:
        prompt, correct_answer = game_validator.validate_question(prompt, correct_answer)
        return QuestionRecord.model_validate(self.api.post(
            f"/api/admin/games/{game_id}/questions",
            json={"prompt": prompt, "correct_answer": correct_answer},
            token=self._token()
        ))

    def update_question(self, game_id: str, question_id: str, prompt: Optional[str] = None,
                        correct_answer: Optional[str] = None) -> QuestionRecord:
        changes = {}
        if prompt is not None:
            changes["prompt"] = prompt
        if correct_answer is not None:
            changes["correct_answer"] = correct_answer
        return QuestionRecord.model_validate(self.api.patch(
            f"/api/admin/games/{game_id}/questions/{question_id}",
            json=changes,
            token=self._token()
        ))

    def player_detail(self, game_id: str, player_id: str) -> PlayerDetail:
        return PlayerDetail.model_validate(
            self.api.get(f"/api/admin/games/{game_id}/players/{player_id}", token=self._token())
        )

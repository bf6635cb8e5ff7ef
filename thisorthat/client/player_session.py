"""
Player-side workflow for one game: join, draft answers, submit, leaderboard.

The joined player id is remembered per game in a LocalStore so later visits
skip the join form. Drafted answers are mirrored to the store on every change
and win over server-saved answers until they are submitted.
"""
import logging
from typing import List, Optional

from thisorthat.client.answer_sheet import AnswerSheet, Drafted, SlotState
from thisorthat.client.http import ApiClient
from thisorthat.client.local_store import LocalStore, draft_key, player_key
from thisorthat.core.exceptions import GameClosed, PlayerNotFound, ValidationFailed
from thisorthat.core.game_config import TIEBREAKER_KEY
from thisorthat.schemas.game import GameView
from thisorthat.schemas.leaderboard import LeaderboardEntry
from thisorthat.schemas.player import PlayerResponse, SavedAnswers
from thisorthat.services.validators import game_validator

logger = logging.getLogger(__name__)


class PlayerSession:

    def __init__(self, slug: str, api: Optional[ApiClient] = None,
                 store: Optional[LocalStore] = None):
        self.slug = slug
        self.api = api or ApiClient()
        self.store = store or LocalStore()
        self.view: Optional[GameView] = None
        self.sheet: Optional[AnswerSheet] = None
        self.player_id: Optional[str] = None

    @property
    def game_id(self) -> str:
        self._require_loaded()
        return self.view.game.id

    def _require_loaded(self) -> None:
        if self.view is None:
            raise ValidationFailed("Game not loaded")

    def _require_player(self) -> None:
        self._require_loaded()
        if self.player_id is None:
            raise ValidationFailed("Join the game before answering")

    def _require_open(self) -> None:
        self._require_loaded()
        if not self.view.game.is_open:
            raise GameClosed(f"Game '{self.slug}' is closed to new answers")

    def load(self) -> GameView:
        """Fetch the game and resume a remembered player, if any."""
        self.view = GameView.model_validate(self.api.get(f"/api/g/{self.slug}"))
        self.sheet = AnswerSheet(
            [q.id for q in self.view.questions],
            tiebreaker_enabled=self.view.game.tiebreaker_enabled
        )
        stored = self.store.get(player_key(self.view.game.id))
        self.player_id = stored if isinstance(stored, str) else None
        if self.player_id:
            self._resume()
        return self.view

    def _resume(self) -> None:
        try:
            saved = SavedAnswers.model_validate(
                self.api.get(f"/api/g/{self.slug}/players/{self.player_id}/answers")
            )
        except PlayerNotFound:
            logger.info(f"Remembered player {self.player_id} no longer exists; join again")
            self.store.remove(player_key(self.game_id))
            self.player_id = None
            return

        saved_slots = dict(saved.answers)
        if saved.tiebreaker is not None:
            saved_slots[TIEBREAKER_KEY] = saved.tiebreaker

        drafts = self.store.get(draft_key(self.game_id, self.player_id))
        self.sheet.reconcile(saved_slots, drafts if isinstance(drafts, dict) else None)

    def join(self, first_name: str, last_name: str = "") -> PlayerResponse:
        self._require_loaded()
        first, last = game_validator.validate_player_names(first_name, last_name)
        player = PlayerResponse.model_validate(self.api.post(
            f"/api/g/{self.slug}/players",
            json={"first_name": first, "last_name": last}
        ))
        self.player_id = player.id
        self.store.set(player_key(self.game_id), player.id)
        self._resume()
        return player

    def state(self, slot: str) -> SlotState:
        self._require_loaded()
        return self.sheet.state(slot)

    def _mirror_drafts(self) -> None:
        key = draft_key(self.game_id, self.player_id)
        drafts = self.sheet.drafts()
        if drafts:
            self.store.set(key, drafts)
        else:
            self.store.remove(key)

    def select(self, question_id: str, choice: str) -> Drafted:
        """Draft an A/B answer for a question."""
        self._require_player()
        drafted = self.sheet.select(question_id, game_validator.validate_choice(choice))
        self._mirror_drafts()
        return drafted

    def set_tiebreaker(self, value: str) -> Drafted:
        self._require_player()
        drafted = self.sheet.select(TIEBREAKER_KEY, str(value).strip())
        self._mirror_drafts()
        return drafted

    def reopen(self, slot: str) -> Drafted:
        self._require_player()
        drafted = self.sheet.reopen(slot)
        self._mirror_drafts()
        return drafted

    def _send(self, slots: dict) -> None:
        answers = [
            {"question_id": slot, "answer_text": value}
            for slot, value in slots.items()
            if slot != TIEBREAKER_KEY
        ]
        payload = {"player_id": self.player_id, "answers": answers}
        if TIEBREAKER_KEY in slots:
            payload["tiebreaker"] = game_validator.validate_tiebreaker_guess(slots[TIEBREAKER_KEY])

        self.api.post(f"/api/g/{self.slug}/answers", json=payload)

        for slot in slots:
            self.sheet.mark_submitted(slot)
        self._mirror_drafts()

    def submit_answer(self, slot: str) -> None:
        """Submit one drafted slot (a question or the tiebreaker)."""
        self._require_open()
        self._require_player()
        state = self.sheet.state(slot)
        if not isinstance(state, Drafted):
            raise ValidationFailed("Please select an answer")
        self._send({slot: state.value})

    def submit_all(self) -> int:
        """
        Submit every drafted answer and the drafted tiebreaker together.

        Every question needs an answer first. On failure nothing is marked
        submitted and the drafts stay in the store for a retry.
        """
        self._require_open()
        self._require_player()
        if not self.sheet.is_complete():
            raise ValidationFailed("Please answer every question before submitting")
        pending = self.sheet.pending()
        if not pending:
            raise ValidationFailed("Nothing to submit")
        self._send(pending)
        logger.info(f"Submitted {len(pending)} answers for player {self.player_id}")
        return len(pending)

    def leaderboard(self) -> List[LeaderboardEntry]:
        data = self.api.get(f"/api/g/{self.slug}/leaderboard")
        return [LeaderboardEntry.model_validate(entry) for entry in data]

"""
Per-question answer state on the player's side.

Each slot (a question id, or TIEBREAKER_KEY) is in exactly one state:

    Unanswered --select--> Drafted(value) --mark_submitted--> Submitted(value)
                               ^                                  |
                               +------------- reopen -------------+

A drafted slot can be re-selected freely. A submitted slot must be reopened
before it can change.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from thisorthat.core.exceptions import ValidationFailed
from thisorthat.core.game_config import TIEBREAKER_KEY


@dataclass(frozen=True)
class Unanswered:
    pass


@dataclass(frozen=True)
class Drafted:
    value: str


@dataclass(frozen=True)
class Submitted:
    value: str


SlotState = Union[Unanswered, Drafted, Submitted]


class AnswerSheet:

    def __init__(self, question_ids: Iterable[str], tiebreaker_enabled: bool = False):
        self.question_ids: List[str] = list(question_ids)
        self.tiebreaker_enabled = tiebreaker_enabled
        self._slots: Dict[str, SlotState] = {qid: Unanswered() for qid in self.question_ids}
        if tiebreaker_enabled:
            self._slots[TIEBREAKER_KEY] = Unanswered()

    def _check_slot(self, slot: str) -> None:
        if slot not in self._slots:
            raise ValidationFailed(f"Unknown question {slot}")

    def state(self, slot: str) -> SlotState:
        self._check_slot(slot)
        return self._slots[slot]

    def select(self, slot: str, value: str) -> Drafted:
        self._check_slot(slot)
        if isinstance(self._slots[slot], Submitted):
            raise ValidationFailed("Answer already submitted; reopen it to change it")
        self._slots[slot] = Drafted(value)
        return self._slots[slot]

    def mark_submitted(self, slot: str) -> Submitted:
        self._check_slot(slot)
        current = self._slots[slot]
        if not isinstance(current, Drafted):
            raise ValidationFailed(f"Nothing drafted for {slot}")
        self._slots[slot] = Submitted(current.value)
        return self._slots[slot]

    def reopen(self, slot: str) -> Drafted:
        self._check_slot(slot)
        current = self._slots[slot]
        if not isinstance(current, Submitted):
            raise ValidationFailed(f"{slot} has not been submitted")
        self._slots[slot] = Drafted(current.value)
        return self._slots[slot]

    def pending(self) -> Dict[str, str]:
        """Drafted values not yet accepted by the server, in question order."""
        return {
            slot: state.value
            for slot, state in self._slots.items()
            if isinstance(state, Drafted)
        }

    def unanswered_questions(self) -> List[str]:
        return [qid for qid in self.question_ids if isinstance(self._slots[qid], Unanswered)]

    def is_complete(self) -> bool:
        return not self.unanswered_questions()

    def drafts(self) -> Dict[str, dict]:
        """Drafted slots in the shape mirrored to the local store."""
        return {slot: {"value": value, "unsaved": True} for slot, value in self.pending().items()}

    def reconcile(self, saved: Dict[str, str], drafts: Optional[Dict[str, dict]] = None) -> None:
        """
        Rebuild every slot from server-saved answers and local drafts.

        Precedence per slot: a local draft marked unsaved, then the saved
        server value, then Unanswered. Draft entries for unknown slots or in
        an unexpected shape are skipped.
        """
        drafts = drafts or {}
        for slot in self._slots:
            entry = drafts.get(slot)
            if isinstance(entry, dict) and entry.get("unsaved") and isinstance(entry.get("value"), str):
                self._slots[slot] = Drafted(entry["value"])
            elif saved.get(slot) is not None:
                self._slots[slot] = Submitted(saved[slot])
            else:
                self._slots[slot] = Unanswered()

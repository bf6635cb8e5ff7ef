"""
Form validation shared by the API routes and the client library.

Every check here runs before any storage or network call.
"""
from typing import Optional, Tuple

from thisorthat.core.exceptions import ValidationFailed
from thisorthat.core.game_config import (
    ANSWER_CHOICES, CORRECT_ANSWERS, DEFAULT_THEME, SLUG_PATTERN, THEMES,
    is_valid_tiebreaker_guess, parse_number
)
from thisorthat.schemas.records import GameRecord


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _optional(value) -> Optional[str]:
    cleaned = _clean(value)
    return cleaned or None


def _tiebreaker_text(value) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


class GameValidator:
    """Validates game forms and state changes."""

    def validate_new_game(self, data: dict) -> dict:
        """
        Validate a new-game form and return the cleaned insert fields.

        Checks run in order: title and slug, option labels, tiebreaker, theme.
        Slug uniqueness needs storage and is checked by the caller.
        """
        title = _clean(data.get("title"))
        slug = _clean(data.get("slug"))
        if not title or not slug:
            raise ValidationFailed("Missing required fields: title, slug")
        if not SLUG_PATTERN.match(slug):
            raise ValidationFailed("Slug must use lowercase letters, numbers and single hyphens")

        option_a = _clean(data.get("option_a_label"))
        option_b = _clean(data.get("option_b_label"))
        if not option_a or not option_b:
            raise ValidationFailed("Missing required fields: option_a_label, option_b_label")

        tiebreaker_enabled = bool(data.get("tiebreaker_enabled"))
        tiebreaker_prompt = _optional(data.get("tiebreaker_prompt"))
        tiebreaker_answer = _tiebreaker_text(data.get("tiebreaker_answer"))
        if tiebreaker_enabled:
            self.validate_tiebreaker(tiebreaker_prompt, tiebreaker_answer)

        theme = self.validate_theme(data.get("theme"))

        is_open = data.get("is_open")
        return {
            "title": title,
            "slug": slug,
            "is_open": is_open if isinstance(is_open, bool) else True,
            "option_a_label": option_a,
            "option_b_label": option_b,
            "option_a_emoji": _optional(data.get("option_a_emoji")),
            "option_b_emoji": _optional(data.get("option_b_emoji")),
            "tiebreaker_enabled": tiebreaker_enabled,
            "tiebreaker_prompt": tiebreaker_prompt,
            "tiebreaker_answer": tiebreaker_answer,
            "theme": theme,
        }

    def validate_game_update(self, current: GameRecord, changes: dict) -> dict:
        """Validate a partial update against the current game; return cleaned fields."""
        cleaned = {}
        for label in ("option_a_label", "option_b_label"):
            if label in changes:
                value = _clean(changes[label])
                if not value:
                    raise ValidationFailed(f"{label} must not be empty")
                cleaned[label] = value
        for emoji in ("option_a_emoji", "option_b_emoji"):
            if emoji in changes:
                cleaned[emoji] = _optional(changes[emoji])
        if changes.get("is_open") is not None:
            cleaned["is_open"] = bool(changes["is_open"])
        if "theme" in changes:
            cleaned["theme"] = self.validate_theme(changes["theme"])

        if "tiebreaker_enabled" in changes and changes["tiebreaker_enabled"] is not None:
            cleaned["tiebreaker_enabled"] = bool(changes["tiebreaker_enabled"])
        if "tiebreaker_prompt" in changes:
            cleaned["tiebreaker_prompt"] = _optional(changes["tiebreaker_prompt"])
        if "tiebreaker_answer" in changes:
            cleaned["tiebreaker_answer"] = _tiebreaker_text(changes["tiebreaker_answer"])

        enabled = cleaned.get("tiebreaker_enabled", current.tiebreaker_enabled)
        if enabled:
            self.validate_tiebreaker(
                cleaned.get("tiebreaker_prompt", current.tiebreaker_prompt),
                cleaned.get("tiebreaker_answer", current.tiebreaker_answer)
            )
        return cleaned

    def validate_tiebreaker(self, prompt: Optional[str], answer: Optional[str]) -> None:
        if answer is None or not str(answer).strip():
            raise ValidationFailed("Tiebreaker answer is required when tiebreaker_enabled is true")
        if parse_number(answer) is None:
            raise ValidationFailed("Tiebreaker answer must be a number")
        if not prompt or not prompt.strip():
            raise ValidationFailed("Tiebreaker prompt is required when tiebreaker_enabled is true")

    def validate_theme(self, theme) -> str:
        if theme is None or theme == "":
            return DEFAULT_THEME
        if theme not in THEMES:
            raise ValidationFailed(f"Unknown theme '{theme}'")
        return theme

    def validate_question(self, prompt, correct_answer) -> Tuple[str, str]:
        cleaned = _clean(prompt)
        if not cleaned:
            raise ValidationFailed("Missing prompt")
        if correct_answer not in CORRECT_ANSWERS:
            raise ValidationFailed('Invalid correct_answer, must be "mom" or "dad"')
        return cleaned, correct_answer

    def validate_player_names(self, first_name, last_name) -> Tuple[str, str]:
        first = _clean(first_name)
        if not first:
            raise ValidationFailed("Please enter your first name")
        return first, _clean(last_name)

    def validate_choice(self, answer_text) -> str:
        if answer_text not in ANSWER_CHOICES:
            raise ValidationFailed(f"Answer must be one of {', '.join(ANSWER_CHOICES)}")
        return answer_text

    def validate_tiebreaker_guess(self, value) -> str:
        text = _clean(value) if not isinstance(value, (int, float)) else str(value)
        if not text:
            raise ValidationFailed("Please enter your tiebreaker answer")
        if not is_valid_tiebreaker_guess(text):
            raise ValidationFailed("Tiebreaker answer must be a number")
        return text


game_validator = GameValidator()

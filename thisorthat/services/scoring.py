"""
Scoring for a game, computed in memory from loaded rows.

Only the latest answer per (player, question) counts. The tiebreaker answer
is tracked in the same way but never adds to the score.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from thisorthat.core.game_config import TIEBREAKER_KEY, expected_choice, parse_number
from thisorthat.schemas.leaderboard import (
    LeaderboardEntry, PlayerDetail, QuestionResult, TiebreakerResult
)
from thisorthat.schemas.records import AnswerRecord, PlayerRecord, QuestionRecord

LatestAnswers = Dict[str, Dict[str, AnswerRecord]]


def _created_key(answer: AnswerRecord) -> Tuple[datetime, int]:
    # Stored timestamps are UTC; SQLite hands them back naive
    created = answer.created_at
    if created is None:
        created = datetime.min
    elif created.tzinfo is not None:
        created = created.astimezone(timezone.utc).replace(tzinfo=None)
    return created, answer.seq


def latest_answers(answers: Iterable[AnswerRecord]) -> LatestAnswers:
    """
    Map player id -> slot -> latest answer.

    The slot is the question id, or TIEBREAKER_KEY for the tiebreaker. Rows
    are walked oldest first; rows with an equal timestamp are ordered by
    their per-player `seq`, so the later write wins.
    """
    latest: LatestAnswers = {}
    for answer in sorted(answers, key=_created_key):
        slot = TIEBREAKER_KEY if answer.is_tiebreaker else answer.question_id
        latest.setdefault(answer.player_id, {})[slot] = answer
    return latest


def score_answers(questions: Iterable[QuestionRecord], slots: Dict[str, AnswerRecord]) -> int:
    score = 0
    for question in questions:
        submitted = slots.get(question.id)
        if submitted is None:
            continue
        if str(submitted.answer_text) == expected_choice(question.correct_answer):
            score += 1
    return score


def rank_scores(entries: List[dict]) -> List[LeaderboardEntry]:
    """
    Sort by score, highest first, and assign competition ranks (1, 1, 3).

    The sort is stable, so equal scores keep their incoming order.
    """
    ordered = sorted(entries, key=lambda e: e["score"], reverse=True)
    ranked = []
    previous_score = None
    rank = 0
    for position, entry in enumerate(ordered, 1):
        if entry["score"] != previous_score:
            rank = position
            previous_score = entry["score"]
        ranked.append(LeaderboardEntry(rank=rank, **entry))
    return ranked


def build_leaderboard(questions: List[QuestionRecord], players: List[PlayerRecord],
                      answers: List[AnswerRecord]) -> List[LeaderboardEntry]:
    """Score every player in the game, including those with no answers."""
    latest = latest_answers(answers)
    entries = []
    for player in players:
        entries.append({
            "player_id": player.id,
            "first_name": player.first_name,
            "last_name": player.last_name,
            "score": score_answers(questions, latest.get(player.id, {}))
        })
    return rank_scores(entries)


def tiebreaker_distance(guess: Optional[str], expected: Optional[str]) -> Optional[float]:
    guess_value = parse_number(guess)
    expected_value = parse_number(expected)
    if guess_value is None or expected_value is None:
        return None
    return abs(guess_value - expected_value)


def closest_tiebreaker_distance(latest: LatestAnswers, expected: Optional[str]) -> Optional[float]:
    distances = [
        tiebreaker_distance(slots[TIEBREAKER_KEY].answer_text, expected)
        for slots in latest.values()
        if TIEBREAKER_KEY in slots
    ]
    distances = [d for d in distances if d is not None]
    return min(distances) if distances else None


def build_player_detail(player: PlayerRecord, questions: List[QuestionRecord],
                        answers: List[AnswerRecord], tiebreaker_enabled: bool,
                        tiebreaker_answer: Optional[str]) -> PlayerDetail:
    """Per-question breakdown for one player, with tiebreaker distance when enabled."""
    latest = latest_answers(answers)
    slots = latest.get(player.id, {})

    results = []
    for question in questions:
        submitted = slots.get(question.id)
        expected = expected_choice(question.correct_answer)
        results.append(QuestionResult(
            question_id=question.id,
            prompt=question.prompt,
            order_index=question.order_index,
            correct_answer=question.correct_answer,
            expected_choice=expected,
            answer_text=submitted.answer_text if submitted else None,
            is_correct=bool(submitted and str(submitted.answer_text) == expected)
        ))

    tiebreaker = None
    if tiebreaker_enabled:
        guess = slots.get(TIEBREAKER_KEY)
        distance = tiebreaker_distance(guess.answer_text if guess else None, tiebreaker_answer)
        closest = closest_tiebreaker_distance(latest, tiebreaker_answer)
        tiebreaker = TiebreakerResult(
            guess=guess.answer_text if guess else None,
            expected=tiebreaker_answer,
            distance=distance,
            correct=distance == 0,
            closest=distance is not None and distance == closest
        )

    return PlayerDetail(
        player_id=player.id,
        first_name=player.first_name,
        last_name=player.last_name,
        score=sum(1 for r in results if r.is_correct),
        answers=results,
        tiebreaker=tiebreaker
    )

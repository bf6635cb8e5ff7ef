"""
Player-facing endpoints: game view, join, answers and leaderboard.
"""
from typing import List

from fastapi import APIRouter, Depends, Response

from thisorthat.api.deps import get_repository
from thisorthat.schemas import answer as answer_schemas
from thisorthat.schemas import game as game_schemas
from thisorthat.schemas import player as player_schemas
from thisorthat.schemas.leaderboard import LeaderboardEntry
from thisorthat.services.answer_service import answer_service_obj
from thisorthat.services.game_service import build_share_links, game_service_obj
from thisorthat.services.leaderboard_service import leaderboard_service_obj
from thisorthat.services.player_service import player_service_obj
from thisorthat.services.repository import GameRepository

router = APIRouter(
    prefix="/g",
    tags=["play"],
    responses={404: {"description": "Game not found"}}
)


@router.get("/{slug}", response_model=game_schemas.GameView)
def get_game(
        slug: str,
        repo: GameRepository = Depends(get_repository)
):
    """Game and ordered questions as players see them (no correct answers)."""
    game = game_service_obj.get_game_by_slug(repo, slug)
    questions = repo.list_questions_for_game(game.id)
    return game_schemas.GameView(
        game=game_schemas.PublicGame.model_validate(game.model_dump()),
        questions=[game_schemas.PublicQuestion.model_validate(q.model_dump()) for q in questions],
        links=build_share_links(game.slug)
    )


@router.post("/{slug}/players", response_model=player_schemas.PlayerResponse)
def join_game(
        slug: str,
        player: player_schemas.PlayerJoin,
        response: Response,
        repo: GameRepository = Depends(get_repository)
):
    """
    Join a game by name.

    Re-joining with the same first and last name returns the existing
    player (200); a new name pair creates one (201).
    """
    record, created = player_service_obj.join_game(repo, slug, player.first_name, player.last_name)
    response.status_code = 201 if created else 200
    return player_schemas.PlayerResponse(**record.model_dump(exclude={"created_at"}), created=created)


@router.get("/{slug}/players/{player_id}/answers", response_model=player_schemas.SavedAnswers)
def get_saved_answers(
        slug: str,
        player_id: str,
        repo: GameRepository = Depends(get_repository)
):
    """The player's latest saved answer per question and tiebreaker."""
    return answer_service_obj.saved_answers(repo, slug, player_id)


@router.post("/{slug}/answers", response_model=answer_schemas.SubmissionResult, status_code=201)
def submit_answers(
        slug: str,
        submission: answer_schemas.AnswerSubmission,
        repo: GameRepository = Depends(get_repository)
):
    """
    Save one or more answers and an optional tiebreaker guess.

    Rejected with 403 when the game is closed. Answers are appended; the
    newest answer per question is the one that counts.
    """
    saved = answer_service_obj.submit_answers(
        repo, slug, submission.player_id, submission.answers, submission.tiebreaker
    )
    return answer_schemas.SubmissionResult(saved=len(saved), answers=saved)


@router.get("/{slug}/leaderboard", response_model=List[LeaderboardEntry])
def get_leaderboard(
        slug: str,
        repo: GameRepository = Depends(get_repository)
):
    """Players ranked by correct answers, highest first. Ties share a rank."""
    return leaderboard_service_obj.get_leaderboard(repo, slug)


@router.post("/{slug}/submit", response_model=answer_schemas.SubmitAck)
def submit(slug: str):
    # TODO: validate and score the full answer set here instead of only acknowledging it
    return answer_schemas.SubmitAck(ok=True, message=f"Received submission for {slug}")

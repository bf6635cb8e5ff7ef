from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from thisorthat.core.exceptions import BackendError, PartialWriteError, SlugTaken
from thisorthat.models.answer import Answer
from thisorthat.services.repository import GameRepository
from thisorthat.services.scoring import latest_answers


@pytest.fixture
def repo(db_session):
    return GameRepository(db_session)


@pytest.fixture
def seeded(repo):
    game = repo.insert_game(
        slug="party", title="Party", option_a_label="Mom", option_b_label="Dad", created_by="host-1"
    )
    question = repo.insert_question(game.id, "Who?", "mom", 0)
    player = repo.insert_player(game.id, "Ann", "")
    return game, question, player


class TestGameRepository:

    def test_missing_rows_read_as_none(self, repo):
        assert repo.fetch_game_by_slug("nope") is None
        assert repo.fetch_player("g1", "p1") is None
        assert repo.max_order_index("g1") is None
        assert repo.list_questions_for_game("g1") == []

    def test_find_player_is_exact(self, repo, seeded):
        game, _, player = seeded
        assert repo.find_player_by_names(game.id, "Ann", "").id == player.id
        assert repo.find_player_by_names(game.id, "ann", "") is None

    def test_storage_failure_is_backend_error(self):
        engine = create_engine("sqlite://")
        session = sessionmaker(bind=engine)()
        try:
            with pytest.raises(BackendError):
                GameRepository(session).fetch_game_by_slug("party")
            with pytest.raises(BackendError):
                GameRepository(session).list_answers_for_game("g1")
        finally:
            session.close()
            engine.dispose()

    def test_partial_answer_write(self, repo, seeded, db_session):
        game, question, player = seeded
        rows = [
            {"game_id": game.id, "player_id": player.id, "question_id": question.id, "answer_text": "A"},
            {"game_id": game.id, "player_id": player.id, "question_id": question.id, "answer_text": None},
            {"game_id": game.id, "player_id": player.id, "question_id": question.id, "answer_text": "B"},
        ]
        with pytest.raises(PartialWriteError) as exc_info:
            repo.insert_answers(rows)

        assert exc_info.value.saved == 1
        assert exc_info.value.total == 3
        assert isinstance(exc_info.value, BackendError)
        assert db_session.query(Answer).count() == 1

    def test_same_timestamp_answers_keep_write_order(self, repo, seeded):
        game, question, player = seeded
        stamp = datetime(2024, 5, 1, 12, 0, 0)
        rows = [
            {"game_id": game.id, "player_id": player.id, "question_id": question.id,
             "answer_text": text, "created_at": stamp}
            for text in ("A", "B", "A", "B")
        ]
        repo.insert_answers(rows[:2])
        repo.insert_answers(rows[2:])

        answers = repo.list_answers_for_game(game.id)
        assert [a.seq for a in answers] == [1, 2, 3, 4]
        assert [a.seq for a in repo.list_answers_for_player(game.id, player.id)] == [1, 2, 3, 4]
        assert latest_answers(answers)[player.id][question.id].seq == 4
        assert latest_answers(answers)[player.id][question.id].answer_text == "B"

    def test_duplicate_slug_insert_is_conflict(self, repo, seeded):
        with pytest.raises(SlugTaken):
            repo.insert_game(slug="party", title="Again", option_a_label="Mom", option_b_label="Dad")
        assert repo.fetch_game_by_slug("party").title == "Party"

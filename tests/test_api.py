import pytest

from thisorthat.core.exceptions import BackendError
from thisorthat.models.answer import Answer
from thisorthat.models.game import Game
from thisorthat.models.player import Player
from thisorthat.services.repository import GameRepository


class TestGameCreation:

    def test_create_game(self, client, host_headers, game_form):
        response = client.post(
            "/api/admin/games",
            json=game_form(title="  Baby Shower  ", option_a_emoji="👩", option_b_emoji="👨"),
            headers=host_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Baby Shower"
        assert data["slug"] == "baby-shower"
        assert data["option_a_label"] == "Mom"
        assert data["option_b_label"] == "Dad"
        assert data["option_a_emoji"] == "👩"
        assert data["is_open"] is True
        assert data["tiebreaker_enabled"] is False
        assert data["theme"] == "default"
        assert data["created_by"] == "host-1"
        assert data["links"]["play"].endswith("/g/baby-shower")
        assert data["links"]["leaderboard"].endswith("/g/baby-shower/leaderboard")

    def test_create_game_closed_with_tiebreaker(self, client, host_headers, game_form):
        response = client.post(
            "/api/admin/games",
            json=game_form(
                is_open=False,
                tiebreaker_enabled=True,
                tiebreaker_prompt=" How many guests? ",
                tiebreaker_answer=42,
                theme="baby-autumn"
            ),
            headers=host_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["is_open"] is False
        assert data["tiebreaker_enabled"] is True
        assert data["tiebreaker_prompt"] == "How many guests?"
        assert data["tiebreaker_answer"] == "42"
        assert data["theme"] == "baby-autumn"

    def test_missing_token(self, client, game_form):
        response = client.post("/api/admin/games", json=game_form())
        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_REQUIRED"

    def test_invalid_token(self, client, game_form):
        response = client.post(
            "/api/admin/games",
            json=game_form(),
            headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    @pytest.mark.parametrize("overrides, message", [
        ({"title": "   "}, "title, slug"),
        ({"slug": ""}, "title, slug"),
        ({"option_b_label": ""}, "option_a_label, option_b_label"),
        ({"slug": "Baby Shower"}, "Slug"),
        ({"theme": "neon"}, "theme"),
    ])
    def test_invalid_fields(self, client, host_headers, game_form, overrides, message):
        response = client.post("/api/admin/games", json=game_form(**overrides), headers=host_headers)
        assert response.status_code == 400
        assert message in response.json()["detail"]

    @pytest.mark.parametrize("overrides", [
        {"tiebreaker_prompt": "Guests?"},
        {"tiebreaker_prompt": "Guests?", "tiebreaker_answer": "lots"},
        {"tiebreaker_answer": 42},
        {"tiebreaker_prompt": "  ", "tiebreaker_answer": 42},
    ])
    def test_tiebreaker_rejected_before_write(self, client, host_headers, game_form, db_session, overrides):
        response = client.post(
            "/api/admin/games",
            json=game_form(tiebreaker_enabled=True, **overrides),
            headers=host_headers
        )
        assert response.status_code == 400
        assert db_session.query(Game).count() == 0

    def test_duplicate_slug(self, client, host_headers, other_headers, game_form, db_session):
        assert client.post("/api/admin/games", json=game_form(), headers=host_headers).status_code == 201
        response = client.post(
            "/api/admin/games",
            json=game_form(title="Another"),
            headers=other_headers
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "SLUG_TAKEN"
        assert db_session.query(Game).count() == 1

    def test_slug_claimed_after_check(self, client, host_headers, other_headers, game_form,
                                      db_session, monkeypatch):
        assert client.post("/api/admin/games", json=game_form(), headers=host_headers).status_code == 201

        original_slug_exists = GameRepository.slug_exists
        checks = []

        def slug_free_on_first_check(self, slug):
            if not checks:
                checks.append(slug)
                return False
            return original_slug_exists(self, slug)

        monkeypatch.setattr(GameRepository, "slug_exists", slug_free_on_first_check)
        response = client.post("/api/admin/games", json=game_form(title="Another"), headers=other_headers)
        assert response.status_code == 409
        assert response.json()["error_code"] == "SLUG_TAKEN"
        assert db_session.query(Game).count() == 1

    def test_backend_failure_on_create(self, client, host_headers, game_form, monkeypatch):
        def broken_insert(self, **fields):
            raise BackendError("Failed to create game: connection reset")

        monkeypatch.setattr(GameRepository, "insert_game", broken_insert)
        response = client.post("/api/admin/games", json=game_form(), headers=host_headers)
        assert response.status_code == 500
        assert response.json()["error_code"] == "BACKEND_ERROR"
        assert response.json()["detail"] == "Failed to create game"

    def test_list_games_for_owner(self, client, host_headers, other_headers, game_form):
        client.post("/api/admin/games", json=game_form(slug="first"), headers=host_headers)
        client.post("/api/admin/games", json=game_form(slug="second"), headers=host_headers)
        client.post("/api/admin/games", json=game_form(slug="theirs"), headers=other_headers)

        response = client.get("/api/admin/games", headers=host_headers)
        assert response.status_code == 200
        assert [g["slug"] for g in response.json()] == ["second", "first"]

    def test_update_game(self, client, host_headers, make_game):
        game = make_game()
        response = client.patch(
            f"/api/admin/games/{game['id']}",
            json={"is_open": False, "option_a_label": " Mum "},
            headers=host_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["is_open"] is False
        assert data["option_a_label"] == "Mum"
        assert data["option_b_label"] == "Dad"

    def test_update_game_validates_tiebreaker(self, client, host_headers, make_game):
        game = make_game()
        response = client.patch(
            f"/api/admin/games/{game['id']}",
            json={"tiebreaker_enabled": True, "tiebreaker_prompt": "Weight?"},
            headers=host_headers
        )
        assert response.status_code == 400

        response = client.patch(
            f"/api/admin/games/{game['id']}",
            json={"option_b_label": "  "},
            headers=host_headers
        )
        assert response.status_code == 400

    def test_update_game_requires_owner(self, client, other_headers, make_game):
        game = make_game()
        response = client.patch(
            f"/api/admin/games/{game['id']}",
            json={"is_open": False},
            headers=other_headers
        )
        assert response.status_code == 403


class TestQuestions:

    def test_order_index_appends(self, client, host_headers, make_game):
        game = make_game()
        url = f"/api/admin/games/{game['id']}/questions"

        first = client.post(url, json={"prompt": " Who cries more? ", "correct_answer": "mom"}, headers=host_headers)
        assert first.status_code == 201
        assert first.json()["order_index"] == 0
        assert first.json()["prompt"] == "Who cries more?"

        second = client.post(url, json={"prompt": "Who sleeps in?", "correct_answer": "dad"}, headers=host_headers)
        assert second.json()["order_index"] == 1

        listed = client.get(url)
        assert listed.status_code == 200
        assert [q["prompt"] for q in listed.json()] == ["Who cries more?", "Who sleeps in?"]

    def test_order_index_after_gap(self, client, host_headers, make_game, db_session):
        from thisorthat.models.question import Question

        game = make_game()
        db_session.add(Question(game_id=game["id"], prompt="Imported", correct_answer="mom", order_index=7))
        db_session.commit()

        response = client.post(
            f"/api/admin/games/{game['id']}/questions",
            json={"prompt": "Next", "correct_answer": "dad"},
            headers=host_headers
        )
        assert response.json()["order_index"] == 8

    @pytest.mark.parametrize("body", [
        {"prompt": "", "correct_answer": "mom"},
        {"prompt": "Who?", "correct_answer": ""},
        {"prompt": "Who?", "correct_answer": "A"},
        {"prompt": "Who?"},
    ])
    def test_invalid_question(self, client, host_headers, make_game, body):
        game = make_game()
        response = client.post(f"/api/admin/games/{game['id']}/questions", json=body, headers=host_headers)
        assert response.status_code == 400

    def test_unknown_game(self, client, host_headers):
        response = client.post(
            "/api/admin/games/missing/questions",
            json={"prompt": "Who?", "correct_answer": "mom"},
            headers=host_headers
        )
        assert response.status_code == 404
        assert client.get("/api/admin/games/missing/questions").status_code == 404

    def test_requires_token_and_owner(self, client, other_headers, make_game):
        game = make_game()
        url = f"/api/admin/games/{game['id']}/questions"
        body = {"prompt": "Who?", "correct_answer": "mom"}
        assert client.post(url, json=body).status_code == 401
        assert client.post(url, json=body, headers=other_headers).status_code == 403

    def test_update_question(self, client, host_headers, make_game):
        game = make_game(questions=[("Who?", "mom")])
        question = client.get(f"/api/admin/games/{game['id']}/questions").json()[0]

        response = client.patch(
            f"/api/admin/games/{game['id']}/questions/{question['id']}",
            json={"correct_answer": "dad"},
            headers=host_headers
        )
        assert response.status_code == 200
        assert response.json()["correct_answer"] == "dad"
        assert response.json()["prompt"] == "Who?"
        assert response.json()["order_index"] == question["order_index"]


class TestPlay:

    def test_public_view_hides_answers(self, client, make_game):
        make_game(
            questions=[("Who?", "mom")],
            tiebreaker_enabled=True, tiebreaker_prompt="Guests?", tiebreaker_answer="42"
        )
        response = client.get("/api/g/baby-shower")
        assert response.status_code == 200
        data = response.json()
        assert data["game"]["tiebreaker_prompt"] == "Guests?"
        assert "tiebreaker_answer" not in data["game"]
        assert "correct_answer" not in data["questions"][0]
        assert client.get("/api/g/nope").status_code == 404

    def test_rejoin_returns_same_player(self, client, make_game, db_session):
        make_game()
        first = client.post("/api/g/baby-shower/players", json={"first_name": "Ann", "last_name": "Lee"})
        assert first.status_code == 201
        again = client.post("/api/g/baby-shower/players", json={"first_name": " Ann ", "last_name": "Lee "})
        assert again.status_code == 200
        assert again.json()["id"] == first.json()["id"]
        assert db_session.query(Player).count() == 1

        other = client.post("/api/g/baby-shower/players", json={"first_name": "Ann"})
        assert other.status_code == 201
        assert other.json()["id"] != first.json()["id"]
        assert other.json()["last_name"] == ""

    def test_join_requires_first_name(self, client, make_game):
        make_game()
        response = client.post("/api/g/baby-shower/players", json={"first_name": "  ", "last_name": "Lee"})
        assert response.status_code == 400

    def test_scenario_a_leaderboard(self, client, make_game):
        make_game(questions=[("Who cries more?", "mom"), ("Who sleeps in?", "dad")])
        questions = client.get("/api/g/baby-shower").json()["questions"]
        ann = client.post("/api/g/baby-shower/players", json={"first_name": "Ann"}).json()
        bob = client.post("/api/g/baby-shower/players", json={"first_name": "Bob"}).json()
        client.post("/api/g/baby-shower/players", json={"first_name": "Cy"})

        response = client.post("/api/g/baby-shower/answers", json={
            "player_id": ann["id"],
            "answers": [
                {"question_id": questions[0]["id"], "answer_text": "A"},
                {"question_id": questions[1]["id"], "answer_text": "A"},
            ]
        })
        assert response.status_code == 201
        assert response.json()["saved"] == 2

        client.post("/api/g/baby-shower/answers", json={
            "player_id": bob["id"],
            "answers": [
                {"question_id": questions[0]["id"], "answer_text": "A"},
                {"question_id": questions[1]["id"], "answer_text": "B"},
            ]
        })

        board = client.get("/api/g/baby-shower/leaderboard").json()
        assert [(e["first_name"], e["score"], e["rank"]) for e in board] == [
            ("Bob", 2, 1), ("Ann", 1, 2), ("Cy", 0, 3)
        ]

    def test_latest_answer_wins(self, client, make_game, db_session):
        make_game(questions=[("Who cries more?", "mom")])
        question = client.get("/api/g/baby-shower").json()["questions"][0]
        ann = client.post("/api/g/baby-shower/players", json={"first_name": "Ann"}).json()

        for choice in ("A", "B"):
            client.post("/api/g/baby-shower/answers", json={
                "player_id": ann["id"],
                "answers": [{"question_id": question["id"], "answer_text": choice}]
            })

        assert db_session.query(Answer).count() == 2
        board = client.get("/api/g/baby-shower/leaderboard").json()
        assert board[0]["score"] == 0

        saved = client.get(f"/api/g/baby-shower/players/{ann['id']}/answers").json()
        assert saved["answers"] == {question["id"]: "B"}
        assert saved["tiebreaker"] is None

    def test_closed_game_rejects_answers(self, client, make_game, db_session):
        make_game(questions=[("Who?", "mom")], is_open=False)
        question = client.get("/api/g/baby-shower").json()["questions"][0]
        ann = client.post("/api/g/baby-shower/players", json={"first_name": "Ann"}).json()

        response = client.post("/api/g/baby-shower/answers", json={
            "player_id": ann["id"],
            "answers": [{"question_id": question["id"], "answer_text": "A"}]
        })
        assert response.status_code == 403
        assert response.json()["error_code"] == "GAME_CLOSED"
        assert db_session.query(Answer).count() == 0

    @pytest.mark.parametrize("body", [
        {"answers": [{"question_id": "not-a-question", "answer_text": "A"}]},
        {"answers": [{"question_id": "__q__", "answer_text": "mom"}]},
        {"answers": [], "tiebreaker": "12"},
        {"answers": []},
    ])
    def test_invalid_answers(self, client, make_game, body):
        make_game(questions=[("Who?", "mom")])
        question = client.get("/api/g/baby-shower").json()["questions"][0]
        ann = client.post("/api/g/baby-shower/players", json={"first_name": "Ann"}).json()
        for answer in body["answers"]:
            if answer["question_id"] == "__q__":
                answer["question_id"] = question["id"]

        response = client.post("/api/g/baby-shower/answers", json={"player_id": ann["id"], **body})
        assert response.status_code == 400

    def test_unknown_player(self, client, make_game):
        make_game(questions=[("Who?", "mom")])
        response = client.post("/api/g/baby-shower/answers", json={"player_id": "ghost", "answers": []})
        assert response.status_code == 404
        assert response.json()["error_code"] == "PLAYER_NOT_FOUND"

    def test_submit_placeholder(self, client):
        response = client.post("/api/g/anything/submit", json={})
        assert response.status_code == 200
        assert response.json() == {"ok": True, "message": "Received submission for anything"}


class TestPlayerDetail:

    def _setup(self, client, make_game):
        make_game(
            questions=[("Who cries more?", "mom"), ("Who sleeps in?", "dad")],
            tiebreaker_enabled=True, tiebreaker_prompt="Guests?", tiebreaker_answer=42
        )
        view = client.get("/api/g/baby-shower").json()
        return view["game"]["id"], view["questions"]

    def _answer(self, client, name, questions, choices, tiebreaker):
        player = client.post("/api/g/baby-shower/players", json={"first_name": name}).json()
        response = client.post("/api/g/baby-shower/answers", json={
            "player_id": player["id"],
            "answers": [
                {"question_id": q["id"], "answer_text": c} for q, c in zip(questions, choices)
            ],
            "tiebreaker": tiebreaker
        })
        assert response.status_code == 201
        return player

    def test_scenario_b_tiebreaker(self, client, host_headers, make_game):
        game_id, questions = self._setup(client, make_game)
        exact = self._answer(client, "Ann", questions, ["A", "A"], "42")
        near = self._answer(client, "Bob", questions, ["A", "A"], "40")

        detail = client.get(f"/api/admin/games/{game_id}/players/{exact['id']}", headers=host_headers).json()
        assert detail["tiebreaker"]["correct"] is True
        assert detail["tiebreaker"]["distance"] == 0
        assert detail["tiebreaker"]["closest"] is True
        assert detail["score"] == 1

        detail = client.get(f"/api/admin/games/{game_id}/players/{near['id']}", headers=host_headers).json()
        assert detail["tiebreaker"]["correct"] is False
        assert detail["tiebreaker"]["distance"] == 2
        assert detail["tiebreaker"]["closest"] is False
        assert detail["score"] == 1
        assert [a["is_correct"] for a in detail["answers"]] == [True, False]

        board = client.get("/api/g/baby-shower/leaderboard").json()
        assert [e["score"] for e in board] == [1, 1]
        assert [e["rank"] for e in board] == [1, 1]

    def test_detail_requires_owner(self, client, other_headers, make_game):
        game_id, questions = self._setup(client, make_game)
        ann = self._answer(client, "Ann", questions, ["A", "B"], "41")
        response = client.get(f"/api/admin/games/{game_id}/players/{ann['id']}", headers=other_headers)
        assert response.status_code == 403

"""HTTP-level behaviour of the dictation endpoints."""

from __future__ import annotations

from conftest import register


def test_create_update_delete_round_trip(client, storage) -> None:
    headers = register(client, "author@example.com")

    created = client.post(
        "/api/dictations",
        headers=headers,
        json={
            "title": "Test",
            "language": "en",
            "words": [
                {"text": "Apple"},
                {"text": "Banana", "audioUrl": "/x.mp3"},
            ],
        },
    )
    assert created.status_code == 201, created.text
    body = created.json()
    assert body["title"] == "Test"
    assert body["isPublic"] is False
    assert [word["text"] for word in body["words"]] == ["Apple", "Banana"]
    assert body["words"][0]["audioUrl"] in storage.files
    assert body["words"][1]["audioUrl"] == "/x.mp3"
    dictation_id = body["id"]

    updated = client.patch(
        f"/api/dictations/{dictation_id}",
        headers=headers,
        json={
            "title": "Test2",
            "language": "en",
            "words": [{"text": "Car"}, {"text": "Bus"}, {"text": "Plane"}],
        },
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["title"] == "Test2"
    assert [word["text"] for word in updated.json()["words"]] == ["Car", "Bus", "Plane"]

    fetched = client.get(f"/api/dictations/{dictation_id}", headers=headers)
    assert fetched.status_code == 200
    assert len(fetched.json()["words"]) == 3

    deleted = client.delete(f"/api/dictations/{dictation_id}", headers=headers)
    assert deleted.status_code == 200
    assert "deleted" in deleted.json()["message"]

    missing = client.get(f"/api/dictations/{dictation_id}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"


def test_script_mismatch_is_a_client_error(client) -> None:
    headers = register(client, "author@example.com")

    response = client.post(
        "/api/dictations",
        headers=headers,
        json={"title": "Bad", "language": "ru", "words": [{"text": "Hello"}]},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "script_mismatch"
    assert client.get("/api/dictations", headers=headers).json() == []


def test_schema_errors_are_rejected_before_the_pipeline(client) -> None:
    headers = register(client, "author@example.com")

    no_words = client.post(
        "/api/dictations",
        headers=headers,
        json={"title": "Empty", "language": "en", "words": []},
    )
    blank_title = client.post(
        "/api/dictations",
        headers=headers,
        json={"title": "   ", "language": "en", "words": [{"text": "Apple"}]},
    )

    assert no_words.status_code == 422
    assert blank_title.status_code == 422


def test_other_users_cannot_modify(client) -> None:
    owner = register(client, "owner@example.com")
    intruder = register(client, "intruder@example.com")
    created = client.post(
        "/api/dictations",
        headers=owner,
        json={"title": "Mine", "language": "en", "words": [{"text": "Apple"}]},
    ).json()

    update = client.patch(
        f"/api/dictations/{created['id']}",
        headers=intruder,
        json={"title": "Stolen", "language": "en", "words": [{"text": "Car"}]},
    )
    delete = client.delete(f"/api/dictations/{created['id']}", headers=intruder)
    read = client.get(f"/api/dictations/{created['id']}", headers=intruder)

    assert update.status_code == 403
    assert delete.status_code == 403
    assert read.status_code == 403
    assert client.get(f"/api/dictations/{created['id']}", headers=owner).json()["title"] == "Mine"


def test_public_listing_and_practice_history(client) -> None:
    owner = register(client, "owner@example.com")
    student = register(client, "student@example.com")
    public = client.post(
        "/api/dictations",
        headers=owner,
        json={
            "title": "Shared",
            "language": "en",
            "isPublic": True,
            "words": [{"text": "Apple"}, {"text": "Banana"}],
        },
    ).json()

    listing = client.get("/api/dictations/public", headers=student)
    assert [item["id"] for item in listing.json()] == [public["id"]]

    completed = client.post(
        "/api/dictations/complete",
        headers=student,
        json={
            "dictationId": public["id"],
            "score": 50,
            "totalWords": 2,
            "correctCount": 1,
            "errors": [{"word": "Banana", "userInput": "Banan", "isCorrect": False}],
        },
    )
    assert completed.status_code == 201, completed.text
    assert completed.json()["errors"][0]["userInput"] == "Banan"

    history = client.get("/api/dictations/history", headers=student)
    assert history.status_code == 200
    assert history.json()[0]["dictationTitle"] == "Shared"
    assert history.json()[0]["correctCount"] == 1
    assert client.get("/api/dictations/history", headers=owner).json() == []


def test_practice_counts_are_validated(client) -> None:
    headers = register(client, "owner@example.com")
    created = client.post(
        "/api/dictations",
        headers=headers,
        json={"title": "Test", "language": "en", "words": [{"text": "Apple"}]},
    ).json()

    response = client.post(
        "/api/dictations/complete",
        headers=headers,
        json={"dictationId": created["id"], "score": 10, "totalWords": 1, "correctCount": 3},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_single_word_endpoints(client) -> None:
    headers = register(client, "owner@example.com")
    created = client.post(
        "/api/dictations",
        headers=headers,
        json={"title": "Test", "language": "en", "words": [{"text": "Apple"}]},
    ).json()

    added = client.post(
        "/api/words",
        headers=headers,
        json={"dictationId": created["id"], "text": "Cherry", "hint": "red"},
    )
    assert added.status_code == 201, added.text
    assert added.json()["audioUrl"] is not None

    texts = [word["text"] for word in client.get("/api/words", headers=headers).json()]
    assert sorted(texts) == ["Apple", "Cherry"]

    removed = client.delete(f"/api/words/{added.json()['id']}", headers=headers)
    assert removed.status_code == 200
    assert client.delete(f"/api/words/{added.json()['id']}", headers=headers).status_code == 404


def test_upload_returns_url(client, storage) -> None:
    headers = register(client, "owner@example.com")

    uploaded = client.post(
        "/api/upload",
        headers=headers,
        files={"file": ("voice.webm", b"RIFFdata", "audio/webm")},
    )
    rejected = client.post(
        "/api/upload",
        headers=headers,
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    empty = client.post(
        "/api/upload",
        headers=headers,
        files={"file": ("voice.mp3", b"", "audio/mpeg")},
    )

    assert uploaded.status_code == 200, uploaded.text
    assert storage.files[uploaded.json()["url"]] == b"RIFFdata"
    assert uploaded.json()["url"].endswith(".webm")
    assert rejected.status_code == 400
    assert empty.status_code == 400


def test_requests_without_token_are_rejected(client) -> None:
    assert client.get("/api/dictations").status_code == 401
    assert client.get(
        "/api/dictations", headers={"Authorization": "Bearer not-a-token"}
    ).status_code == 401


def test_health_reports_database_and_echoes_request_id(client) -> None:
    response = client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.status_code == 200
    assert response.json()["database"] == "ok"
    assert response.headers["X-Request-ID"] == "abc123"


def test_values_wider_than_columns_are_rejected(client, synthesizer) -> None:
    headers = register(client, "author@example.com")
    base = {"title": "Wide", "language": "en", "words": [{"text": "Apple"}]}

    long_language = client.post(
        "/api/dictations",
        headers=headers,
        json={**base, "language": "english-united-states"},
    )
    long_hint = client.post(
        "/api/dictations",
        headers=headers,
        json={**base, "words": [{"text": "Apple", "hint": "h" * 501}]},
    )
    long_url = client.post(
        "/api/dictations",
        headers=headers,
        json={**base, "words": [{"text": "Apple", "audioUrl": "/" + "u" * 1024}]},
    )
    long_draft_language = client.post(
        "/api/dictations/draft",
        headers=headers,
        json={"title": "Draft", "language": "x" * 11},
    )

    assert long_language.status_code == 422
    assert long_hint.status_code == 422
    assert long_url.status_code == 422
    assert long_draft_language.status_code == 422
    assert synthesizer.calls == []
    assert client.get("/api/dictations", headers=headers).json() == []

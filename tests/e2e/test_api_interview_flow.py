from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.routes import get_orchestrator
from api_server import app
from flow_manager import InterviewOrchestrator
from storage.interviews import InterviewStore

ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


@pytest.fixture
def client(routes, flow, fake_llm, sleeps):
    app.dependency_overrides[get_orchestrator] = lambda: InterviewOrchestrator(
        routes,
        flow=flow,
        store=InterviewStore(),
        client=fake_llm,
        sleep=sleeps.append,
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create(client, **body):
    payload = {"resume_text": "Go and Python backend engineer", "job_description": "Platform engineer", "total_questions": 3}
    payload.update(body)
    resp = client.post("/api/interviews", json=payload, headers=ALICE)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    health = client.get("/health").json()
    assert health["status"] == "ok"
    assert health["uptime"] >= 0


def test_identity_header_required(client):
    assert client.get("/api/interviews").status_code == 401
    assert client.post("/api/interviews", json={"job_description": "SRE"}).status_code == 401


def test_create_requires_some_input(client):
    resp = client.post("/api/interviews", json={"resume_text": " ", "job_description": ""}, headers=ALICE)

    assert resp.status_code == 400


def test_full_interview_through_http(client, fake_llm):
    created = _create(client)
    sid = created["session"]["session_id"]
    interview_id = created["interview"]["interview_id"]
    assert created["session"]["status"] == "not_started"

    view = client.post(f"/api/sessions/{sid}/start", headers=ALICE).json()
    assert view["status"] == "in_progress"
    assert view["question"] == {"number": 1, "text": "Question 1?"}

    for number in range(1, 4):
        resp = client.post(f"/api/sessions/{sid}/answer", json={"answer": f"Answer {number}"}, headers=ALICE)
        assert resp.status_code == 200, resp.text
        view = resp.json()

    assert view["status"] == "awaiting_coding_decision"
    assert view["question"] is None
    assert len(view["turns"]) == 3

    view = client.post(f"/api/sessions/{sid}/coding", headers=ALICE).json()
    assert view["status"] == "completed"
    assert view["coding_challenge"]["title"] == "Two Sum"

    view = client.post(
        f"/api/sessions/{sid}/code",
        json={"code": "def solve(nums, target):\n    return [0, 1]", "language": "python"},
        headers=ALICE,
    ).json()
    assert view["coding_result"]["result"]["passed"] is True

    view = client.post(f"/api/sessions/{sid}/feedback", headers=ALICE).json()
    assert view["feedback"]["hiring_recommendation"] == "Hire"
    assert view["feedback_saved"] is True

    listed = client.get("/api/interviews", headers=ALICE).json()
    assert [item["interview_id"] for item in listed] == [interview_id]
    assert listed[0]["status"] == "completed"
    assert listed[0]["question_count"] == 3

    detail = client.get(f"/api/interviews/{interview_id}", headers=ALICE).json()
    assert [item["user_answer"] for item in detail["questions"]] == ["Answer 1", "Answer 2", "Answer 3"]
    assert detail["coding"]["passed"] is True
    assert detail["feedback"]["total_score"] == 78
    assert fake_llm.calls == {"question": 3, "challenge": 1, "review": 1, "feedback": 1}


def test_resume_url_only_falls_back_to_general_interview(client, fake_llm):
    created = _create(client, resume_text=None, job_description=None, resume_url="https://files.test/cv.pdf")
    sid = created["session"]["session_id"]

    client.post(f"/api/sessions/{sid}/start", headers=ALICE)

    assert created["interview"]["resume_url"] == "https://files.test/cv.pdf"
    assert "RESUME TEXT:\nGeneral Interview" in fake_llm.prompts[0]


def test_illegal_transition_is_conflict(client):
    sid = _create(client)["session"]["session_id"]

    resp = client.post(f"/api/sessions/{sid}/answer", json={"answer": "too early"}, headers=ALICE)

    assert resp.status_code == 409


def test_blank_answer_is_bad_request(client):
    sid = _create(client)["session"]["session_id"]
    client.post(f"/api/sessions/{sid}/start", headers=ALICE)

    resp = client.post(f"/api/sessions/{sid}/answer", json={"answer": ""}, headers=ALICE)

    assert resp.status_code == 400


def test_question_failure_returns_500_and_keeps_session(client, fake_llm):
    sid = _create(client)["session"]["session_id"]
    client.post(f"/api/sessions/{sid}/start", headers=ALICE)
    fake_llm.fail_next("question")

    resp = client.post(f"/api/sessions/{sid}/answer", json={"answer": "Answer 1"}, headers=ALICE)

    assert resp.status_code == 500
    assert "question 2" in resp.json()["detail"]
    view = client.get(f"/api/sessions/{sid}", headers=ALICE).json()
    assert view["turns"] == []
    assert view["current_question_number"] == 1

    retried = client.post(f"/api/sessions/{sid}/answer", json={"answer": "Answer 1"}, headers=ALICE)
    assert retried.status_code == 200
    assert retried.json()["current_question_number"] == 2


def test_end_early_then_skip_coding(client):
    sid = _create(client)["session"]["session_id"]
    client.post(f"/api/sessions/{sid}/start", headers=ALICE)
    client.post(f"/api/sessions/{sid}/answer", json={"answer": "Answer 1"}, headers=ALICE)

    view = client.post(f"/api/sessions/{sid}/end", headers=ALICE).json()
    assert view["status"] == "awaiting_coding_decision"
    assert len(view["turns"]) == 1

    view = client.post(f"/api/sessions/{sid}/coding/skip", headers=ALICE).json()
    assert view["status"] == "completed"
    assert view["coding_result"]["skipped"] is True


def test_other_owner_cannot_see_session_or_interview(client):
    created = _create(client)
    sid = created["session"]["session_id"]

    assert client.get(f"/api/sessions/{sid}", headers=BOB).status_code == 404
    assert client.post(f"/api/sessions/{sid}/start", headers=BOB).status_code == 404
    assert client.get(f"/api/interviews/{created['interview']['interview_id']}", headers=BOB).status_code == 404
    assert client.get("/api/interviews/unknown", headers=ALICE).status_code == 404


def test_reset_opens_new_interview(client):
    created = _create(client)
    sid = created["session"]["session_id"]
    client.post(f"/api/sessions/{sid}/start", headers=ALICE)

    view = client.post(f"/api/sessions/{sid}/reset", headers=ALICE).json()

    assert view["status"] == "not_started"
    assert view["turns"] == []
    assert view["interview_id"] != created["interview"]["interview_id"]
    assert len(client.get("/api/interviews", headers=ALICE).json()) == 2

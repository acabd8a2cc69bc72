import json
import os
import re
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import ROUTE_KEYS, FlowSettings, LlmRoute, RetryPolicy
from config.settings import settings
from storage.migrate import migrate


_QUESTION_RE = re.compile(r"Generate question (\d+) of (\d+)")

CHALLENGE_REPLY = {
    "language": "python",
    "title": "Two Sum",
    "description": "Find two numbers adding up to a target.",
    "problemStatement": "Given nums and target, return the indices of the two numbers.",
    "constraints": ["2 <= len(nums) <= 10^4", "exactly one solution"],
    "starterCode": "def solve(nums, target):\n    pass",
    "testCases": [
        {"input": "[2,7,11,15], 9", "expectedOutput": "[0,1]"},
        {"input": "[3,2,4], 6", "expectedOutput": "[1,2]"},
    ],
}

REVIEW_REPLY = {
    "passed": True,
    "feedback": "Correct hash map solution in O(n).",
    "testResults": [
        {"input": "[2,7,11,15], 9", "expected": "[0,1]", "actual": "[0,1]", "passed": True},
    ],
}

FEEDBACK_REPLY = {
    "totalScore": 78,
    "interviewScore": 74,
    "codingScore": 85,
    "strengths": ["Clear communication", "Solid fundamentals"],
    "weaknesses": ["Limited system design depth"],
    "detailedFeedback": "Strong overall with room to grow in architecture.",
    "hiringRecommendation": "Hire",
}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("not json")
        return self._payload


def completion(content):
    return FakeResponse(payload={"choices": [{"message": {"role": "assistant", "content": content}}]})


class ScriptedClient:
    """Replays queued replies in order and records each request."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    def post(self, url, *, json, headers, timeout):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return completion(reply)


class FakeLlm:
    """Answers each prompt according to the operation it asks for."""

    def __init__(self):
        self.prompts = []
        self.calls = {"question": 0, "challenge": 0, "review": 0, "feedback": 0}
        self.failures = {}
        self.replies = {
            "challenge": json.dumps(CHALLENGE_REPLY),
            "review": json.dumps(REVIEW_REPLY),
            "feedback": "Here is the report:\n```json\n" + json.dumps(FEEDBACK_REPLY) + "\n```",
        }

    def fail_next(self, kind, times=1):
        self.failures[kind] = self.failures.get(kind, 0) + times

    def post(self, url, *, json, headers, timeout):
        prompt = json["messages"][0]["content"]
        self.prompts.append(prompt)
        kind = _classify(prompt)
        self.calls[kind] += 1
        if self.failures.get(kind):
            self.failures[kind] -= 1
            return FakeResponse(status_code=503, payload={"error": "unavailable"})
        if kind == "question":
            number = int(_QUESTION_RE.search(prompt).group(1))
            return completion(
                '```json\n{"question": "Question %d?", "expectedAnswer": "Key points %d"}\n```' % (number, number)
            )
        return completion(self.replies[kind])

    def question_prompts(self):
        return [prompt for prompt in self.prompts if _classify(prompt) == "question"]


def _classify(prompt):
    if _QUESTION_RE.search(prompt):
        return "question"
    if "final interview report" in prompt:
        return "feedback"
    if "code evaluator" in prompt:
        return "review"
    if "coding challenge" in prompt:
        return "challenge"
    raise AssertionError(f"unexpected prompt: {prompt[:80]}")


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "CHECKPOINT_DIR", os.path.join(td.name, "sessions"), raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def route():
    return LlmRoute(
        name="test",
        base_url="http://llm.test/api/v1",
        endpoint="/chat/completions",
        model="test-model",
        timeout_s=5,
        api_key_env="TEST_LLM_API_KEY",
        extra_headers={"X-Title": "Tests"},
    )


@pytest.fixture
def routes(route):
    return {key: route for key in ROUTE_KEYS}


@pytest.fixture
def flow():
    return FlowSettings(total_questions=10, context_window=6, resume_char_budget=2500, coding_retry=RetryPolicy())


@pytest.fixture
def fake_llm():
    return FakeLlm()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_client():
    return ScriptedClient


@pytest.fixture
def fake_response():
    return FakeResponse

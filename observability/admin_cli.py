"""Lightweight CLI helpers for inspecting stored interviews."""
from __future__ import annotations

import argparse
from typing import List, Optional

from storage.interviews import InterviewNotFound, InterviewStore


def list_interviews(owner_id: str, store: Optional[InterviewStore] = None) -> List[str]:
    store = store or InterviewStore()
    lines = []
    for record in store.list_interviews(owner_id):
        verdict = record.feedback.hiring_recommendation if record.feedback else "-"
        score = record.feedback.total_score if record.feedback else "-"
        lines.append(
            f"[{record.created_at}] {record.interview_id} status={record.status} "
            f"questions={record.question_count} score={score} verdict={verdict}"
        )
    return lines


def show_interview(interview_id: str, owner_id: str, store: Optional[InterviewStore] = None) -> List[str]:
    store = store or InterviewStore()
    try:
        detail = store.get_interview(interview_id, owner_id)
    except InterviewNotFound:
        return [f"interview {interview_id} not found for {owner_id}"]
    lines = [f"{detail.interview_id} status={detail.status} updated={detail.updated_at}"]
    for item in detail.questions:
        lines.append(f"Q{item.position}: {item.question_text}")
        lines.append(f"A{item.position}: {item.user_answer if item.user_answer is not None else '(unanswered)'}")
    if detail.coding is not None:
        state = "skipped" if detail.coding.skipped else ("passed" if detail.coding.passed else "failed")
        lines.append(f"coding: {detail.coding.title} [{state}]")
    if detail.feedback is not None:
        lines.append(
            f"feedback: total={detail.feedback.total_score} verdict={detail.feedback.hiring_recommendation}"
        )
    return lines


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--owner", required=True, help="Owner id whose interviews are inspected")
    parser.add_argument("--show", metavar="INTERVIEW_ID", help="Print one interview transcript")
    args = parser.parse_args(argv)

    lines = show_interview(args.show, args.owner) if args.show else list_interviews(args.owner)
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()

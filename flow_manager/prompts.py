from __future__ import annotations  # Question prompt rendering

from textwrap import dedent

from langchain_core.prompts import PromptTemplate

from .context_window import BoundedContext, render_history
from .models import QuestionRole


EXPERIENCE = "experience"
TECHNICAL_DEPTH = "technical_depth"
SYSTEM_DESIGN = "system_design"
BEHAVIORAL = "behavioral"

CATEGORY_GUIDANCE = {
    EXPERIENCE: "Experience-based: dig into a specific project or role from the resume. Ask why they chose X over Y and what they would change.",
    TECHNICAL_DEPTH: "Technical depth: probe the internals of the technologies they claim, including trade-offs, failure modes and performance.",
    SYSTEM_DESIGN: "System design: ask them to design or scale a system relevant to their background. Look for reliability, scalability and data modelling.",
    BEHAVIORAL: "Behavioral: probe leadership, mentorship, conflict resolution or handling failure in a technical context.",
}

NO_JOB_DESCRIPTION = "Not provided (Focus on general software engineering skills based on resume)"

INTERVIEWER_PREAMBLE = dedent(
    """
    You are an expert technical interviewer at a top-tier tech company (e.g., Google, Netflix, Amazon).
    Your goal is to assess the candidate deeply, looking for signals of seniority, problem-solving ability, and system design thinking.
    AVOID generic trivia (e.g., "What is a hook?"). Ask "How" and "Why" questions.
    """
).strip()

DIFFICULTY_PROGRESSION = dedent(
    """
    Difficulty progression across the interview:
    - Questions 1-3: experience-based (deep dive into resume projects)
    - Questions 4-6: technical depth
    - Questions 7-9: system design and architecture
    - Question 10: behavioral
    """
).strip()

JSON_CONTRACT = dedent(
    """
    Return ONLY a valid JSON object with exactly these fields:
    {{"question": "the interview question", "expectedAnswer": "key points expected in a good answer"}}
    NO introductory text. NO markdown formatting. NO text before or after the JSON.
    """
).strip()

FIRST_QUESTION_PROMPT = PromptTemplate.from_template(
    "\n\n".join(
        [
            INTERVIEWER_PREAMBLE,
            "You are opening the interview. Generate question {question_number} of {total_questions}.",
            DIFFICULTY_PROGRESSION,
            "Focus for this question:\n{guidance}",
            "RESUME TEXT:\n{resume_excerpt}",
            "JOB DESCRIPTION:\n{job_description}",
            JSON_CONTRACT,
        ]
    )
)

FOLLOW_UP_PROMPT = PromptTemplate.from_template(
    "\n\n".join(
        [
            INTERVIEWER_PREAMBLE,
            "The interview is under way. Generate question {question_number} of {total_questions}.",
            "Adapt to the candidate's previous answers: follow up on weak or vague answers, go deeper on strong ones, and never repeat a question already asked.",
            DIFFICULTY_PROGRESSION,
            "Focus for this question:\n{guidance}",
            "RESUME TEXT:\n{resume_excerpt}",
            "JOB DESCRIPTION:\n{job_description}",
            "CONVERSATION SO FAR:\n{history}",
            JSON_CONTRACT,
        ]
    )
)


def question_category(question_number: int) -> str:  # Map a 1-based question index to its difficulty band
    if question_number < 1:
        raise ValueError("question_number is 1-based")
    if question_number <= 3:
        return EXPERIENCE
    if question_number <= 6:
        return TECHNICAL_DEPTH
    if question_number <= 9:
        return SYSTEM_DESIGN
    return BEHAVIORAL


def build_question_prompt(
    role: QuestionRole,
    context: BoundedContext,
    job_description: str,
    question_number: int,
    total_questions: int,
) -> str:  # Deterministically render the question-generation prompt
    role = QuestionRole(role)
    template = FIRST_QUESTION_PROMPT if role is QuestionRole.FIRST else FOLLOW_UP_PROMPT
    values = {
        "question_number": question_number,
        "total_questions": total_questions,
        "guidance": CATEGORY_GUIDANCE[question_category(question_number)],
        "resume_excerpt": context.resume_excerpt.strip() or "No resume provided. Focus on Job Description.",
        "job_description": job_description.strip() or NO_JOB_DESCRIPTION,
    }
    if role is QuestionRole.FOLLOW_UP:
        values["history"] = render_history(context)
    return template.format(**values)


__all__ = [
    "BEHAVIORAL",
    "CATEGORY_GUIDANCE",
    "EXPERIENCE",
    "SYSTEM_DESIGN",
    "TECHNICAL_DEPTH",
    "build_question_prompt",
    "question_category",
]

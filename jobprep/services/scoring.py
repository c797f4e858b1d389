"""Scoring rules for submitted tests."""

from jobprep.models import TestType


def answer_key(question_id) -> str:
    """Answers are keyed by the question id as a string."""
    return str(question_id)


def question_ids(questions: list[dict]) -> set[str]:
    return {answer_key(q.get("id")) for q in questions}


def score_quiz(questions: list[dict], answers: dict[str, str]) -> int:
    """One point per exact, case-sensitive match with the correct option id."""
    score = 0
    for q in questions:
        answer = answers.get(answer_key(q.get("id")))
        if answer is not None and answer == q.get("correctAnswer"):
            score += 1
    return score


def score_coding(answers: dict[str, str]) -> int:
    """Attempt credit: one point per distinct answered question.

    Code is not executed or graded.
    """
    return len({answer_key(k) for k in answers})


def score_answers(test_type: TestType, questions: list[dict], answers: dict[str, str]) -> int:
    if TestType(test_type) == TestType.QUIZ:
        return score_quiz(questions, answers)
    return score_coding(answers)


def percentage(score: int, max_score: int) -> int:
    if not max_score:
        return 0
    return round(score / max_score * 100)


def performance_label(percent: int) -> str:
    if percent >= 80:
        return "Excellent!"
    if percent >= 70:
        return "Good Job!"
    if percent >= 50:
        return "Keep Practicing"
    return "Needs Improvement"

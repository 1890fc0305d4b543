"""
Automatic scoring of objective questions.

Runs exactly once per session, inside the transaction that completes it
(manual submit or expiry). Essay questions are left for a human grader and
never count toward the maximum score.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from exams.models import Question
from exams.selectors import list_approved_questions
from .models import Answer, ExamSession

logger = logging.getLogger(__name__)


class ScoringError(Exception):
    pass


# --- Correct answer normalization ---
# Question.correct_answer is free-form JSON. It is parsed into one of these
# before any comparison happens.

@dataclass(frozen=True)
class McqAnswer:
    letter: str


@dataclass(frozen=True)
class TrueFalseAnswer:
    value: bool


class Unrecognized:
    def __repr__(self):
        return "UNRECOGNIZED"


UNRECOGNIZED = Unrecognized()


def _parse_bool(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def normalize_correct_answer(question_type, raw):
    """
    Parse a stored correct answer into McqAnswer, TrueFalseAnswer or UNRECOGNIZED.

    Accepts the plain forms ("b", true) and the legacy wrapper {"answer": ...}.
    Anything else is UNRECOGNIZED, which scores as incorrect.
    """
    value = raw.get("answer") if isinstance(raw, dict) else raw

    if question_type == Question.QuestionType.MULTIPLE_CHOICE:
        # Some legacy keys store the option as a number
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and value.strip():
            return McqAnswer(value.strip().upper())
        return UNRECOGNIZED

    if question_type == Question.QuestionType.TRUE_FALSE:
        parsed = _parse_bool(value)
        if parsed is None:
            return UNRECOGNIZED
        return TrueFalseAnswer(parsed)

    return UNRECOGNIZED


def is_answer_correct(correct, selected_option):
    if isinstance(correct, McqAnswer):
        return selected_option.strip().upper() == correct.letter
    if isinstance(correct, TrueFalseAnswer):
        submitted = _parse_bool(selected_option)
        return submitted is not None and submitted == correct.value
    return False


def grade_question(question, selected_option):
    """Correctness of one submitted option. A malformed question grades as incorrect."""
    if not selected_option or not selected_option.strip():
        return False
    try:
        correct = normalize_correct_answer(question.question_type, question.correct_answer)
        return is_answer_correct(correct, selected_option)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Could not grade question {question.pk}, counting it as incorrect: {e}")
        return False


def percentage_of(total_score, max_possible_score):
    """Whole percentage rounded half up; 0 when nothing was scoreable."""
    if max_possible_score <= 0:
        return 0
    ratio = Decimal(total_score) * 100 / Decimal(max_possible_score)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ScoringResult:
    session_id: int
    total_score: int
    max_possible_score: int
    percentage: int
    passed: bool
    questions_scored: int
    questions_total: int


def score_completed_session(session):
    """
    Score a session that has just been completed and persist the verdicts.

    Must be called inside the transaction that completed the session. Every
    objective question ends up with an Answer row carrying is_correct/points,
    including questions the candidate never touched.
    """
    if session.status != ExamSession.Status.COMPLETED:
        raise ScoringError(f"Session {session.pk} is {session.status}, only completed sessions are scored")
    if session.score is not None:
        raise ScoringError(f"Session {session.pk} has already been scored")

    exam = session.exam
    questions = list_approved_questions(exam.question_bank_id)
    answers = {answer.question_id: answer for answer in session.answers.all()}

    total_score = 0
    max_possible_score = 0
    questions_scored = 0
    to_create = []
    to_update = []

    for question in questions:
        if not question.is_objective:
            continue

        max_possible_score += question.points
        questions_scored += 1

        answer = answers.get(question.pk)
        if answer is None:
            # Unanswered: record an explicit zero
            answer = Answer(session=session, question=question)
            to_create.append(answer)
        else:
            to_update.append(answer)

        answer.is_correct = grade_question(question, answer.selected_option)
        answer.points = question.points if answer.is_correct else 0
        total_score += answer.points

    if to_create:
        Answer.objects.bulk_create(to_create)
    if to_update:
        Answer.objects.bulk_update(to_update, ['is_correct', 'points'])

    percentage = percentage_of(total_score, max_possible_score)
    passed = percentage >= exam.passing_score

    session.score = percentage
    session.passed = passed
    session.save(update_fields=['score', 'passed'])

    logger.info(
        f"Scored session {session.pk}: {total_score}/{max_possible_score} "
        f"({percentage}%), passed={passed}"
    )

    return ScoringResult(
        session_id=session.pk,
        total_score=total_score,
        max_possible_score=max_possible_score,
        percentage=percentage,
        passed=passed,
        questions_scored=questions_scored,
        questions_total=len(questions),
    )

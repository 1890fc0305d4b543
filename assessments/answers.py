"""
Answer store: per-question answers of an IN_PROGRESS session.

Each save replaces the whole answer payload for that question (last write
wins), so callers send the complete current state, flag included.
"""
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from exams.selectors import list_approved_questions
from .exceptions import QuestionNotInExam, SessionNotActive
from .lifecycle import expire_if_due, lock_owned_session
from .models import Answer, ExamSession

logger = logging.getLogger(__name__)


def save_answer(session_id, question_id, candidate_id, selected_option=None,
                text_response=None, is_flagged=False, question_index=None, now=None):
    """
    Upsert the candidate's answer and remember the question as last viewed.

    `question_index` defaults to the question's position in the exam. Raises
    SessionNotActive unless the session is IN_PROGRESS; a session found past
    its expiry is submitted first and then rejected the same way.
    """
    now = now or timezone.now()
    with transaction.atomic():
        session = lock_owned_session(session_id, candidate_id)
        if session.status != ExamSession.Status.IN_PROGRESS:
            raise SessionNotActive()

        expired = expire_if_due(session, now)
        if expired is None:
            questions = list_approved_questions(session.exam.question_bank_id)
            position = next(
                (index for index, question in enumerate(questions) if question.pk == question_id),
                None,
            )
            if position is None:
                raise QuestionNotInExam()

            if question_index is None:
                question_index = position
            elif question_index >= len(questions):
                raise ValidationError({"question_index": "Question index is out of range."})

            answer, created = Answer.objects.update_or_create(
                session=session,
                question_id=question_id,
                defaults={
                    'selected_option': selected_option,
                    'text_response': text_response,
                    'is_flagged': is_flagged,
                },
            )
            session.last_viewed_question_index = question_index
            session.save(update_fields=['last_viewed_question_index'])
            return answer

    # The auto-submit above has committed; only now reject the save
    logger.info(f"Rejected answer for expired session {session_id}; session was auto-submitted")
    raise SessionNotActive("Time is up. Your answers have been submitted.")

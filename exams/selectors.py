from .models import Question


def list_approved_questions(question_bank_id):
    """
    Approved questions of a bank in creation order.

    The order must stay stable so that a resumed session shows the same
    question sequence and `last_viewed_question_index` keeps pointing at
    the same question.
    """
    return list(
        Question.objects.filter(
            question_bank_id=question_bank_id,
            status=Question.Status.APPROVED,
        )
        .prefetch_related('options')
        .order_by('created_at', 'id')
    )

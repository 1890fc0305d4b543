from django.utils import timezone
from rest_framework import generics, permissions, status, views
from rest_framework.response import Response

from .answers import save_answer
from .lifecycle import (
    check_session_time, get_session_for_candidate, list_sessions_for_candidate,
    resume_session, start_exam, start_session, submit_session,
)
from .serializers import (
    ActiveExamSessionSerializer, AnswerSaveSerializer, AnswerSerializer,
    ExamSessionSerializer, ScoringResultSerializer,
)


# --- STUDENT EXAM FLOW ---

class StartExamView(views.APIView):
    """
    Candidate starts a new attempt for an accepted enrollment.
    The session is created NOT_STARTED; the clock starts on begin.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, enrollment_id):
        session = start_exam(enrollment_id, request.user.pk)
        return Response(
            {"session_id": session.pk, "attempt_number": session.attempt_number, "status": session.status},
            status=status.HTTP_201_CREATED,
        )


class ResumeSessionView(views.APIView):
    """Hands back the open session, or its result if it ran out of time meanwhile."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, enrollment_id):
        resumed = resume_session(enrollment_id, request.user.pk)
        if resumed.auto_submitted:
            return Response({
                "session_id": resumed.session_id,
                "auto_submitted": True,
                "reason": resumed.reason,
                "message": "Session expired. Your answers have been submitted.",
                "result": ScoringResultSerializer(resumed.result).data,
            })
        return Response({"session_id": resumed.session_id, "auto_submitted": False})


class BeginSessionView(views.APIView):
    """NOT_STARTED -> IN_PROGRESS. Returns the session with its questions."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, session_id):
        now = timezone.now()
        session = start_session(session_id, request.user.pk, now=now)
        serializer = ActiveExamSessionSerializer(session, context={"request": request, "now": now})
        return Response(serializer.data)


class SaveAnswerView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request, session_id, question_id):
        serializer = AnswerSaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        answer = save_answer(session_id, question_id, request.user.pk, **serializer.validated_data)
        return Response(AnswerSerializer(answer).data)


class SubmitExamView(views.APIView):
    """Candidate submits. Objective questions are scored immediately."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, session_id):
        result = submit_session(session_id, request.user.pk)
        return Response(ScoringResultSerializer(result).data)


class SessionTimeCheckView(views.APIView):
    """Polled by the exam page; auto-submits once time is up."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, session_id):
        check = check_session_time(session_id, request.user.pk)
        data = {
            "session_id": check.session_id,
            "status": check.status,
            "minutes_remaining": check.minutes_remaining,
            "auto_submitted": check.auto_submitted,
        }
        if check.result is not None:
            data["result"] = ScoringResultSerializer(check.result).data
        return Response(data)


class StudentExamAttemptsView(generics.ListAPIView):
    """List all exam sessions for the logged-in candidate (Lightweight)."""
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ExamSessionSerializer

    def get_queryset(self):
        return list_sessions_for_candidate(self.request.user.pk)


class ExamSessionDetailView(generics.RetrieveAPIView):
    """Candidate retrieves one of their sessions (Heavy - Includes Questions)."""
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ActiveExamSessionSerializer

    def get_object(self):
        return get_session_for_candidate(self.kwargs['pk'], self.request.user.pk)

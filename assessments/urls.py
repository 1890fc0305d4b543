from django.urls import path
from .views import (
    StartExamView, ResumeSessionView, BeginSessionView, SaveAnswerView,
    SubmitExamView, SessionTimeCheckView, StudentExamAttemptsView, ExamSessionDetailView,
)

urlpatterns = [
    # --- Attempts (per enrollment) ---
    path('enrollments/<int:enrollment_id>/start/', StartExamView.as_view(), name='start-exam'),
    path('enrollments/<int:enrollment_id>/resume/', ResumeSessionView.as_view(), name='resume-session'),

    # --- Session flow ---
    path('sessions/', StudentExamAttemptsView.as_view(), name='student-attempts'),
    path('sessions/<int:pk>/', ExamSessionDetailView.as_view(), name='session-detail'),
    path('sessions/<int:session_id>/begin/', BeginSessionView.as_view(), name='begin-session'),
    path('sessions/<int:session_id>/answers/<int:question_id>/', SaveAnswerView.as_view(), name='save-answer'),
    path('sessions/<int:session_id>/submit/', SubmitExamView.as_view(), name='submit-exam'),
    path('sessions/<int:session_id>/time-check/', SessionTimeCheckView.as_view(), name='session-time-check'),
]

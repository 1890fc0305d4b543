from django.urls import path
from .views import PendingInvitationsView, EnrolledExamsView, AcceptInvitationView, DeclineInvitationView

urlpatterns = [
    path('enrollments/', EnrolledExamsView.as_view(), name='enrolled-exams'),
    path('enrollments/pending/', PendingInvitationsView.as_view(), name='pending-invitations'),
    path('enrollments/<int:enrollment_id>/accept/', AcceptInvitationView.as_view(), name='accept-invitation'),
    path('enrollments/<int:enrollment_id>/decline/', DeclineInvitationView.as_view(), name='decline-invitation'),
]

from rest_framework import generics, permissions, views
from rest_framework.response import Response

from .serializers import EnrollmentSerializer, InvitationSerializer
from .services import accept_invitation, decline_invitation, list_enrolled_exams, list_pending_invitations


class PendingInvitationsView(generics.ListAPIView):
    """Invitations waiting for the logged-in candidate, expired ones flagged."""
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = InvitationSerializer
    pagination_class = None

    def get_queryset(self):
        return list_pending_invitations(self.request.user.pk)


class EnrolledExamsView(generics.ListAPIView):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = EnrollmentSerializer
    pagination_class = None

    def get_queryset(self):
        return list_enrolled_exams(self.request.user.pk)


class AcceptInvitationView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, enrollment_id):
        enrollment = accept_invitation(enrollment_id, request.user.pk)
        return Response(EnrollmentSerializer(enrollment).data)


class DeclineInvitationView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, enrollment_id):
        enrollment = decline_invitation(enrollment_id, request.user.pk)
        return Response({"id": enrollment.pk, "status": enrollment.status})

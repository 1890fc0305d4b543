from rest_framework import serializers

from assessments.serializers import SessionStateSerializer
from exams.serializers import ExamSummarySerializer
from .models import Enrollment

class InvitationSerializer(serializers.ModelSerializer):
    """Pending invitation as listed to the invited candidate."""
    exam = ExamSummarySerializer(read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True)
    is_expired = serializers.BooleanField(read_only=True, default=False)

    class Meta:
        model = Enrollment
        fields = ['id', 'exam', 'organization_name', 'status', 'invited_at', 'expires_at', 'is_expired']
        read_only_fields = fields

class EnrollmentSerializer(serializers.ModelSerializer):
    exam = ExamSummarySerializer(read_only=True)
    attempts_remaining = serializers.SerializerMethodField()
    latest_session = serializers.SerializerMethodField()

    class Meta:
        model = Enrollment
        fields = ['id', 'exam', 'status', 'attempts_used', 'attempts_remaining', 'approved_at', 'latest_session']
        read_only_fields = fields

    def get_attempts_remaining(self, obj):
        return max(obj.exam.allowed_attempts - obj.attempts_used, 0)

    def get_latest_session(self, obj):
        # Filled by list_enrolled_exams; fall back to a query for single enrollments
        sessions = getattr(obj, 'recent_sessions', None)
        if sessions is None:
            sessions = list(obj.sessions.select_related('exam').order_by('-created_at', '-id')[:1])
        if not sessions:
            return None
        return SessionStateSerializer(sessions[0]).data

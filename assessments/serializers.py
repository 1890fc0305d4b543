from django.utils import timezone
from rest_framework import serializers

from exams.selectors import list_approved_questions
from exams.serializers import CandidateQuestionSerializer
from .models import ExamSession, Answer

class AnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Answer
        fields = ['id', 'question', 'selected_option', 'text_response', 'is_flagged', 'is_correct', 'points', 'updated_at']
        read_only_fields = ['is_correct', 'points', 'updated_at']

class AnswerSaveSerializer(serializers.Serializer):
    """Full answer state for one question. Omitted fields are saved as empty."""
    selected_option = serializers.CharField(max_length=50, allow_null=True, allow_blank=True, default=None)
    text_response = serializers.CharField(allow_null=True, allow_blank=True, default=None, trim_whitespace=False)
    is_flagged = serializers.BooleanField(default=False)
    question_index = serializers.IntegerField(min_value=0, allow_null=True, default=None)

class ExamSessionSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists / dashboard history."""
    exam_id = serializers.IntegerField(source='exam.id', read_only=True)
    exam_title = serializers.CharField(source='exam.title', read_only=True)

    class Meta:
        model = ExamSession
        fields = [
            'id', 'exam_id', 'exam_title', 'enrollment', 'attempt_number', 'status',
            'created_at', 'started_at', 'completed_at', 'completion_reason', 'score', 'passed',
        ]
        read_only_fields = fields

class ActiveExamSessionSerializer(ExamSessionSerializer):
    """Heavy serializer for taking the exam. Includes QUESTIONS, never their answers key."""
    duration_minutes = serializers.IntegerField(source='exam.duration_minutes', read_only=True)
    allowed_attempts = serializers.IntegerField(source='exam.allowed_attempts', read_only=True)
    expires_at = serializers.DateTimeField(read_only=True)
    minutes_remaining = serializers.SerializerMethodField()
    questions = serializers.SerializerMethodField()
    answers = AnswerSerializer(many=True, read_only=True)

    class Meta(ExamSessionSerializer.Meta):
        fields = ExamSessionSerializer.Meta.fields + [
            'duration_minutes', 'allowed_attempts', 'last_viewed_question_index',
            'expires_at', 'minutes_remaining', 'questions', 'answers',
        ]
        read_only_fields = fields

    def get_minutes_remaining(self, obj):
        if obj.status == ExamSession.Status.COMPLETED:
            return None
        return obj.minutes_remaining(self.context.get('now') or timezone.now())

    def get_questions(self, obj):
        questions = list_approved_questions(obj.exam.question_bank_id)
        return CandidateQuestionSerializer(questions, many=True).data

class ScoringResultSerializer(serializers.Serializer):
    session_id = serializers.IntegerField()
    score = serializers.IntegerField(source='percentage')
    passed = serializers.BooleanField()
    total_score = serializers.IntegerField()
    max_score = serializers.IntegerField(source='max_possible_score')
    questions_scored = serializers.IntegerField()
    questions_total = serializers.IntegerField()

class SessionStateSerializer(serializers.ModelSerializer):
    """Latest attempt as shown on the enrolled exams list, enough to pick resume / start / result."""
    expires_at = serializers.DateTimeField(read_only=True)

    class Meta:
        model = ExamSession
        fields = ['id', 'attempt_number', 'status', 'started_at', 'completed_at', 'expires_at', 'score', 'passed']
        read_only_fields = fields

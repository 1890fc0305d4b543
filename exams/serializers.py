# exams/serializers.py
from rest_framework import serializers
from .models import Exam, Question, Option

# --- Helper Serializers ---

class OptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Option
        fields = ['id', 'label', 'text']

# --- Question Serializers ---

class CandidateQuestionSerializer(serializers.ModelSerializer):
    """Question as shown while taking an exam. Never exposes the correct answer."""
    options = OptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ['id', 'text', 'question_type', 'points', 'options']

# --- Exam Serializers ---

class ExamSummarySerializer(serializers.ModelSerializer):
    organization_name = serializers.CharField(source='organization.name', read_only=True)

    class Meta:
        model = Exam
        fields = [
            'id', 'title', 'description', 'organization_name', 'status',
            'duration_minutes', 'scheduled_start', 'scheduled_end',
            'allowed_attempts', 'passing_score',
        ]

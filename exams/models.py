# exams/models.py
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from cores.models import Organization

class QuestionBank(models.Model):
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='question_banks')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

class Exam(models.Model):
    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        SCHEDULED = "SCHEDULED", "Scheduled"
        ACTIVE = "ACTIVE", "Active"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    # Sessions may only be created while the exam is in one of these states
    STARTABLE_STATUSES = (Status.ACTIVE, Status.SCHEDULED)

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='exams')
    question_bank = models.ForeignKey(QuestionBank, on_delete=models.PROTECT, related_name='exams')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    duration_minutes = models.PositiveIntegerField()
    scheduled_start = models.DateTimeField(null=True, blank=True)
    scheduled_end = models.DateTimeField(null=True, blank=True)
    allowed_attempts = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    passing_score = models.PositiveIntegerField(default=70, validators=[MaxValueValidator(100)])

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title

    @property
    def is_startable(self):
        return self.status in self.STARTABLE_STATUSES

    def window_contains(self, moment):
        """True unless both window bounds are set and `moment` falls outside them."""
        if self.scheduled_start is None or self.scheduled_end is None:
            return True
        return self.scheduled_start <= moment <= self.scheduled_end

class Question(models.Model):
    class QuestionType(models.TextChoices):
        MULTIPLE_CHOICE = "multiple_choice", "Multiple Choice"
        TRUE_FALSE = "true_false", "True / False"
        ESSAY = "essay", "Essay"

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PENDING_REVIEW = "PENDING_REVIEW", "Pending Review"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    # Essays need a human grader and never count toward automatic scoring
    OBJECTIVE_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE)

    question_bank = models.ForeignKey(QuestionBank, related_name='questions', on_delete=models.CASCADE)
    text = models.TextField()
    question_type = models.CharField(max_length=20, choices=QuestionType.choices, default=QuestionType.MULTIPLE_CHOICE)
    points = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)

    # "A".."E" for MCQ, true/false for true_false, or a legacy {"answer": ...} object
    correct_answer = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.text[:50]}..."

    @property
    def is_objective(self):
        return self.question_type in self.OBJECTIVE_TYPES

class Option(models.Model):
    question = models.ForeignKey(Question, related_name='options', on_delete=models.CASCADE)
    label = models.CharField(max_length=1)
    text = models.CharField(max_length=255)

    class Meta:
        ordering = ['label']
        unique_together = ('question', 'label')

    def __str__(self):
        return f"{self.label}. {self.text}"

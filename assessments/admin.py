from django.contrib import admin

from .models import ExamSession, Answer

class AnswerInline(admin.TabularInline):
    model = Answer
    extra = 0
    readonly_fields = ('is_correct', 'points', 'updated_at')

@admin.register(ExamSession)
class ExamSessionAdmin(admin.ModelAdmin):
    list_display = ('candidate', 'exam', 'attempt_number', 'status', 'score', 'passed', 'completed_at')
    list_filter = ('status', 'completion_reason', 'passed')
    readonly_fields = ('score', 'passed', 'started_at', 'completed_at', 'completion_reason')
    inlines = [AnswerInline]

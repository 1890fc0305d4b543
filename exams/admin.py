from django.contrib import admin

# Register your models here.
from .models import Exam, Question, Option, QuestionBank

class OptionInline(admin.TabularInline):
    model = Option
    extra = 0

@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('text', 'question_bank', 'question_type', 'points', 'status')
    list_filter = ('question_type', 'status')
    inlines = [OptionInline]

@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ('title', 'organization', 'status', 'scheduled_start', 'scheduled_end', 'allowed_attempts')
    list_filter = ('status',)

admin.site.register(QuestionBank)

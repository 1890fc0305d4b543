from django.contrib import admin

from .models import Enrollment

@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ('candidate', 'exam', 'organization', 'status', 'attempts_used', 'invited_at', 'expires_at')
    list_filter = ('status', 'organization')
    readonly_fields = ('attempts_used', 'approved_at', 'approved_by')

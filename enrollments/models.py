# enrollments/models.py
from django.conf import settings
from django.db import models

from cores.models import Organization
from exams.models import Exam

class Enrollment(models.Model):
    """A candidate's authorized relationship to one exam, across all attempts."""
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        # Some coordinators call this "approved"; it is the same state
        ENROLLED = "ENROLLED", "Enrolled"
        REJECTED = "REJECTED", "Rejected"

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='enrollments')
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='enrollments')
    candidate = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='enrollments')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    # Only ever incremented, together with the session it accounts for
    attempts_used = models.PositiveIntegerField(default=0)

    invited_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField(null=True, blank=True)  # invitation expiry, not session expiry
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name='approved_enrollments'
    )

    class Meta:
        unique_together = ('exam', 'candidate')

    def __str__(self):
        return f"{self.candidate} - {self.exam.title} ({self.status})"

    def invitation_expired(self, now):
        return self.expires_at is not None and self.expires_at < now

from django.db import models
from django.conf import settings

class Organization(models.Model):
    name = models.CharField(max_length=150)
    slug = models.SlugField(max_length=150, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class OrganizationMembership(models.Model):
    """A user's role inside one tenant organization."""
    class Role(models.TextChoices):
        SUPER_ADMIN = "super_admin", "Super Admin"
        ORG_ADMIN = "org_admin", "Organization Admin"
        EXAM_AUTHOR = "exam_author", "Exam Author"
        EXAM_COORDINATOR = "exam_coordinator", "Exam Coordinator"
        ENROLLMENT_MANAGER = "enrollment_manager", "Enrollment Manager"
        PROCTOR_REVIEWER = "proctor_reviewer", "Proctor Reviewer"
        CANDIDATE = "candidate", "Candidate"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='memberships')
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=30, choices=Role.choices, default=Role.CANDIDATE)

    class Meta:
        unique_together = ('user', 'organization', 'role')

    def __str__(self):
        return f"{self.user} - {self.organization} ({self.role})"

from django.conf import settings
from django.db import models


class Submission(models.Model):
    form = models.ForeignKey(
        'forms.Form',
        on_delete=models.CASCADE,
        related_name='submissions'
    )
    # Exact version the submitter loaded. RESTRICT keeps the version alive for
    # as long as any submission references it (unless the whole form goes).
    version = models.ForeignKey(
        'forms.FormVersion',
        on_delete=models.RESTRICT,
        related_name='submissions'
    )
    data = models.JSONField(default=dict)
    # null for anonymous submissions
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='submissions'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at', '-id')
        indexes = [models.Index(fields=['form', 'created_at'], name='submissions_form_created_idx')]

    def __str__(self):
        return f"Submission {self.id} for form {self.form_id} @ {self.version.sha[:8]}"

    @property
    def is_anonymous(self) -> bool:
        return self.created_by_id is None

    @property
    def version_sha(self) -> str:
        return self.version.sha


class SubmissionToken(models.Model):
    """Access credential for one anonymous submission.

    Stores a sha256 *digest* of the token, never the token itself.
    """
    submission = models.OneToOneField(
        Submission,
        on_delete=models.CASCADE,
        related_name='access_token'
    )
    token_hash = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Token for submission {self.submission_id}"

from django.conf import settings
from django.db import models


class Form(models.Model):
    class Visibility(models.TextChoices):
        PUBLIC = 'public', 'Public'
        PRIVATE = 'private', 'Private'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    visibility = models.CharField(max_length=10, choices=Visibility.choices, default=Visibility.PUBLIC)
    # Single live pointer per form. Only the live pointer service writes this.
    live_version = models.ForeignKey(
        'FormVersion',
        null=True,
        blank=True,
        on_delete=models.RESTRICT,
        related_name='live_for',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='forms',
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return f"{self.name} ({self.visibility})"

    @property
    def is_public(self) -> bool:
        return self.visibility == self.Visibility.PUBLIC

    @property
    def live_version_sha(self):
        return self.live_version.sha if self.live_version_id else None


class FormVersion(models.Model):
    """Immutable, content-addressed snapshot of a form schema.

    `sha` covers (form, parent_sha, salt, schema); none of those columns are
    ever updated after insert. Only `description`, `is_published` and
    `published_at` change over a version's lifetime.
    """
    form = models.ForeignKey(
        Form,
        on_delete=models.CASCADE,
        related_name='versions',
    )
    sha = models.CharField(max_length=64, unique=True)
    parent_sha = models.CharField(max_length=64, null=True, blank=True)
    salt = models.CharField(max_length=32)
    schema = models.JSONField(default=dict)
    description = models.TextField(blank=True, default='')
    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.RESTRICT,
        related_name='form_versions',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at', '-id')
        indexes = [
            models.Index(fields=['form', 'is_published'], name='forms_version_form_pub_idx'),
        ]

    def __str__(self):
        return f"{self.form_id}@{self.sha[:8]}{' (published)' if self.is_published else ''}"

    @property
    def is_live(self) -> bool:
        return self.form.live_version_id == self.id

"""Append-only storage of form versions.

Every row is content addressed: `sha` is the sha256 of the canonical JSON of
the version envelope (form id, parent sha, salt) together with its schema.
Schemas are never updated in place; an edit always produces a new row.
"""
import hashlib
import json
import logging
import secrets
from typing import Any, Optional

from django.db import transaction
from django.db.models import ProtectedError, QuerySet, RestrictedError

from formhub.exceptions import Conflict, NotFound, ValidationError
from forms import models as form_models
from forms.schema import parse_schema

logger = logging.getLogger(__name__)


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def compute_sha(form_id: int, parent_sha: Optional[str], salt: str, schema: Any) -> str:
    """sha256 over the whole version envelope, not the schema alone.

    A draft cloned from the live version has the same schema but must get its
    own id, so the form, the parent sha and a per-row salt are hashed with it.
    All four are stored, which keeps the digest recomputable by `verify_sha`.
    """
    envelope = {
        'form': form_id,
        'parent': parent_sha,
        'salt': salt,
        'schema': schema,
    }
    return hashlib.sha256(canonical_json(envelope).encode('utf-8')).hexdigest()


def verify_sha(version: form_models.FormVersion) -> bool:
    """Recompute the digest from stored columns and compare with `version.sha`."""
    expected = compute_sha(version.form_id, version.parent_sha, version.salt, version.schema)
    return secrets.compare_digest(expected, version.sha)


def _log(event: str, version: form_models.FormVersion, **extra):
    payload = {
        'event': event,
        'form_id': version.form_id,
        'sha': version.sha,
        'parent_sha': version.parent_sha,
        'is_published': version.is_published,
    }
    payload.update(extra)
    logger.info('%s', payload)


@transaction.atomic
def create_version(form: form_models.Form, schema: Any, author, description: str = '', parent_sha: Optional[str] = None) -> form_models.FormVersion:
    """Insert a new immutable version row for `form`."""
    parse_schema(schema)
    if not isinstance(description, str):
        raise ValidationError({'description': 'Description must be a string.'})

    salt = secrets.token_hex(8)
    sha = compute_sha(form.id, parent_sha, salt, schema)
    version = form_models.FormVersion.objects.create(
        form=form,
        sha=sha,
        parent_sha=parent_sha,
        salt=salt,
        schema=schema,
        description=description,
        created_by=author,
    )
    _log('version_created', version, author_id=getattr(author, 'id', None))
    return version


def list_versions(form: form_models.Form) -> QuerySet:
    return form_models.FormVersion.objects.filter(form=form).select_related('created_by').order_by('-created_at', '-id')


def get_version(form: form_models.Form, sha: str) -> form_models.FormVersion:
    version = form_models.FormVersion.objects.filter(form=form, sha=sha).select_related('created_by').first()
    if version is None:
        raise NotFound('Version not found.')
    return version


@transaction.atomic
def update_description(form: form_models.Form, sha: str, description: str) -> form_models.FormVersion:
    """Edit the description of a draft. Published versions are frozen."""
    version = form_models.FormVersion.objects.select_for_update().filter(form=form, sha=sha).first()
    if version is None:
        raise NotFound('Version not found.')
    if version.is_published:
        raise Conflict('Published versions cannot be edited.')

    version.description = description
    version.save(update_fields=['description', 'updated_at'])
    return version


@transaction.atomic
def delete_draft(form: form_models.Form, sha: str) -> None:
    """Delete a draft that was never published and nothing references."""
    locked_form = form_models.Form.objects.select_for_update().get(pk=form.pk)
    version = form_models.FormVersion.objects.select_for_update().filter(form=locked_form, sha=sha).first()
    if version is None:
        raise NotFound('Version not found.')
    if version.is_published or locked_form.live_version_id == version.id:
        raise Conflict('Published versions cannot be deleted.')
    if version.submissions.exists():
        raise Conflict('Version is referenced by submissions and cannot be deleted.')

    try:
        version.delete()
    except (ProtectedError, RestrictedError) as exc:
        logger.warning('delete_draft failed form=%s sha=%s: %s', form.id, sha, exc)
        raise Conflict('Version is still referenced and cannot be deleted.')
    logger.info('%s', {'event': 'version_deleted', 'form_id': form.id, 'sha': sha})

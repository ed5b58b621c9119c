"""Live version pointer transitions.

`Form.live_version` is the only record of which version is served to
submitters. It is moved exclusively by `publish_version`, which performs
read-current / validate-target / write-pointer as a single transaction with
the form row locked, so concurrent publishes for one form serialize and the
last committed write wins.
"""
import logging
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import RestrictedError
from django.utils import timezone

from formhub.exceptions import Conflict, Internal, NotFound
from forms import models as form_models
from forms.services import access_control

logger = logging.getLogger(__name__)


def get_live_version(form: form_models.Form) -> Optional[form_models.FormVersion]:
    if not form.live_version_id:
        return None
    return form.live_version


def _lock_target(form_id: int, sha: str) -> Optional[form_models.FormVersion]:
    return form_models.FormVersion.objects.select_for_update().filter(form_id=form_id, sha=sha).first()


def _apply(form_id: int, sha: str, expected_live_sha: Optional[str]) -> form_models.Form:
    form = form_models.Form.objects.select_for_update().get(pk=form_id)
    target = _lock_target(form_id, sha)
    if target is None:
        # validated before the lock was taken; the row disappeared since
        raise Conflict('Target version was removed before it could be published.')

    if expected_live_sha is not None:
        current_sha = (
            form_models.FormVersion.objects.filter(pk=form.live_version_id).values_list('sha', flat=True).first()
            if form.live_version_id else None
        )
        if current_sha != expected_live_sha:
            raise Conflict('The live version changed since it was read.')

    if not target.is_published:
        target.is_published = True
        target.published_at = timezone.now()
        target.save(update_fields=['is_published', 'published_at', 'updated_at'])

    previous_id = form.live_version_id
    form.live_version = target
    form.save(update_fields=['live_version', 'updated_at'])
    logger.info('%s', {
        'event': 'version_published',
        'form_id': form_id,
        'sha': target.sha,
        'previous_version_id': previous_id,
    })
    return form


def publish_version(form_id: int, sha: str, actor, expected_live_sha: Optional[str] = None) -> form_models.Form:
    """Atomically point the form at its version `sha` and mark that version published.

    Only the form owner may publish. Returns the updated form.
    Raises NotFound when the form is missing or `sha` is not one of its
    versions, AuthRequired/AccessDenied for non-owners, Conflict when the
    target vanished before commit or `expected_live_sha` no longer matches,
    Internal on any other storage failure. On failure the previous pointer is
    left untouched.
    """
    form = form_models.Form.objects.filter(pk=form_id).first()
    if form is None:
        raise NotFound('Form not found.')
    access_control.require_form_owner(form, actor)
    if not form_models.FormVersion.objects.filter(form=form, sha=sha).exists():
        raise NotFound('Version not found.')

    try:
        with transaction.atomic():
            updated = _apply(form.pk, sha, expected_live_sha)
    except Conflict as exc:
        logger.warning('publish_version conflict form=%s sha=%s: %s', form.pk, sha, exc)
        raise
    except (IntegrityError, RestrictedError) as exc:
        logger.warning('publish_version conflict form=%s sha=%s: %s', form.pk, sha, exc)
        raise Conflict('Target version was removed before it could be published.')
    except form_models.Form.DoesNotExist:
        logger.warning('publish_version form=%s vanished during publish', form.pk)
        raise NotFound('Form not found.')
    except DatabaseError as exc:
        logger.error('publish_version failed form=%s sha=%s: %r', form.pk, sha, exc)
        raise Internal()

    return updated

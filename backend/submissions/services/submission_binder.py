"""Bind new submissions to the exact form version the submitter loaded.

The client captures the live version sha when it renders the form and sends
it back with the payload. The submission is stamped with that sha, not with
whatever is live at submit time, so a publish in between never changes how a
submission is validated or rendered.
"""
import hashlib
import logging
import secrets
from typing import Any, Optional, Tuple

from django.conf import settings
from django.db import transaction

from formhub.exceptions import AuthRequired, InvalidVersion, NotFound
from forms import models as form_models
from forms.schema import parse_schema
from forms.services import access_control as form_access
from forms.services import form_validator
from submissions import models as sub_models

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """Random hex access token with at least 256 bits of entropy."""
    nbytes = max(32, int(getattr(settings, 'FORMS_SUBMISSION_TOKEN_BYTES', 32)))
    return secrets.token_hex(nbytes)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _resolve_version(form: form_models.Form, version_sha: Optional[str], user) -> form_models.FormVersion:
    if not version_sha:
        raise InvalidVersion('versionSha is required.')
    version = form_models.FormVersion.objects.filter(form=form, sha=version_sha).first()
    if version is None:
        raise InvalidVersion()
    # drafts are only submittable by the owner (preview testing)
    if not version.is_published and not form_access.can_manage_form(form, user):
        raise InvalidVersion('Version has not been published.')
    return version


def create_submission(form_id: int, version_sha: Optional[str], data: Any, user=None) -> Tuple[sub_models.Submission, Optional[str]]:
    """Create a submission bound to `version_sha`.

    Returns ``(submission, token)``; `token` is only set for anonymous
    submitters and is the sole credential for reading the submission later.
    Every validation happens before the first write.
    """
    form = form_models.Form.objects.filter(pk=form_id).first()
    if form is None:
        raise NotFound('Form not found.')

    actor = form_access.get_actor(user)
    if not form_access.can_submit(form, actor):
        raise AuthRequired('You must be logged in to submit this form.')

    version = _resolve_version(form, version_sha, actor)
    form_validator.validate_submission_data(parse_schema(version.schema), data)

    token = None
    with transaction.atomic():
        submission = sub_models.Submission.objects.create(
            form=form,
            version=version,
            data=data,
            created_by=actor,
            updated_by=actor,
        )
        if actor is None:
            token = generate_token()
            sub_models.SubmissionToken.objects.create(submission=submission, token_hash=hash_token(token))

    logger.info('%s', {
        'event': 'submission_created',
        'submission_id': submission.id,
        'form_id': form.id,
        'version_sha': version.sha,
        'anonymous': actor is None,
    })
    return submission, token

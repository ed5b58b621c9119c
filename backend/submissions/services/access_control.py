import secrets
from typing import Optional

from formhub.exceptions import AccessDenied, AuthRequired
from forms.services import access_control as form_access
from submissions import models as sub_models
from submissions.services.submission_binder import hash_token


def token_matches(submission: sub_models.Submission, token: Optional[str]) -> bool:
    if not token or not submission.is_anonymous:
        return False
    stored = sub_models.SubmissionToken.objects.filter(submission=submission).values_list('token_hash', flat=True).first()
    if stored is None:
        return False
    return secrets.compare_digest(stored, hash_token(token))


def can_user_view_submission(submission: sub_models.Submission, user, token: Optional[str] = None) -> bool:
    """Centralized check whether the caller may read `submission`.

    Rules (True if any):
    - caller owns the form (or is superuser)
    - caller is the authenticated creator of the submission
    - submission is anonymous and `token` matches its access token
    The form's public flag plays no part here.
    """
    if form_access.can_manage_form(submission.form, user):
        return True

    actor = form_access.get_actor(user)
    if actor is not None and submission.created_by_id == actor.id:
        return True

    return token_matches(submission, token)


def require_submission_access(submission: sub_models.Submission, user, token: Optional[str] = None) -> None:
    if can_user_view_submission(submission, user, token):
        return
    if form_access.get_actor(user) is None and not token:
        raise AuthRequired('A login or access token is required to view this submission.')
    raise AccessDenied('Not authorized to view this submission.')

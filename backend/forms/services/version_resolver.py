"""Resolve the starting schema for a new draft and create it.

Drafts are not unique per form: concurrent requests each get their own row
and whichever draft is published last becomes live. Callers that need to
detect a stale base should pass `expected_live_sha` when publishing.
"""
import copy
import logging
from typing import Any, Optional, Tuple

from django.db import transaction

from forms import models as form_models
from forms.schema import blank_schema, parse_schema
from forms.services import live_pointer, version_store

logger = logging.getLogger(__name__)


def resolve_base_schema(form: form_models.Form, base_version_sha: Optional[str] = None) -> Tuple[Any, Optional[str]]:
    """Return ``(schema, parent_sha)`` a new draft should start from.

    Explicit base version, else the live version, else the blank scaffold.
    The schema returned is always an independent deep copy.
    """
    if base_version_sha:
        base = version_store.get_version(form, base_version_sha)
        return copy.deepcopy(base.schema), base.sha

    live = live_pointer.get_live_version(form)
    if live is not None:
        return copy.deepcopy(live.schema), live.sha

    return blank_schema(), None


def _default_description(form: form_models.Form, base_version_sha: Optional[str]) -> str:
    if base_version_sha:
        return f'Restored from version {base_version_sha[:8]}'
    if form.live_version_id:
        return 'New draft version'
    return 'Initial draft version'


def create_draft(
    form: form_models.Form,
    author,
    description: Optional[str] = None,
    schema: Any = None,
    base_version_sha: Optional[str] = None,
    publish: bool = False,
) -> form_models.FormVersion:
    """Create a new draft version of `form` authored by `author`.

    When `schema` is given (the builder saving edits) it becomes the draft's
    content and `base_version_sha`, or the live version, is recorded as its
    parent. Otherwise the content is cloned from the base/live version, or
    the blank scaffold when nothing was ever published.
    """
    if schema is not None:
        parse_schema(schema)
        _, parent_sha = resolve_base_schema(form, base_version_sha)
        content = copy.deepcopy(schema)
    else:
        content, parent_sha = resolve_base_schema(form, base_version_sha)

    if not description:
        description = _default_description(form, base_version_sha)

    with transaction.atomic():
        version = version_store.create_version(form, content, author, description=description, parent_sha=parent_sha)
        if publish:
            updated = live_pointer.publish_version(form.id, version.sha, author)
            form.live_version = updated.live_version
            version.refresh_from_db()
    return version

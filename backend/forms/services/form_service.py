import logging
from typing import Any, Optional

from django.db import transaction

from forms import models as form_models
from forms.schema import parse_schema
from forms.services import live_pointer, version_store

logger = logging.getLogger(__name__)


@transaction.atomic
def create_form(owner, name: str, description: str = '', visibility: str = form_models.Form.Visibility.PUBLIC, schema: Optional[Any] = None) -> form_models.Form:
    """Create a form owned by `owner`.

    A supplied schema becomes the initial version and is published right away,
    so the form is immediately submittable.
    """
    if schema is not None:
        parse_schema(schema)

    form = form_models.Form.objects.create(
        name=name,
        description=description or '',
        visibility=visibility,
        created_by=owner,
        updated_by=owner,
    )
    if schema is not None:
        initial = version_store.create_version(form, schema, owner, description='Initial version')
        form = live_pointer.publish_version(form.id, initial.sha, owner)

    logger.info('%s', {'event': 'form_created', 'form_id': form.id, 'owner_id': owner.id, 'has_schema': schema is not None})
    return form


def update_form(form: form_models.Form, user, **changes) -> form_models.Form:
    fields = []
    for name in ('name', 'description', 'visibility'):
        if name in changes:
            setattr(form, name, changes[name])
            fields.append(name)
    form.updated_by = user
    form.save(update_fields=fields + ['updated_by', 'updated_at'])
    return form


@transaction.atomic
def delete_form(form: form_models.Form) -> None:
    """Remove a form together with its versions, submissions and tokens."""
    form_id = form.id
    # break the form <-> live version cycle before the cascade
    form_models.Form.objects.filter(pk=form_id).update(live_version=None)
    form.live_version = None
    form.delete()
    logger.info('%s', {'event': 'form_deleted', 'form_id': form_id})

from forms import models as form_models
from formhub.exceptions import AccessDenied, AuthRequired


def get_actor(user):
    """Return the authenticated user or None for anonymous requests."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    return user


def can_manage_form(form: form_models.Form, user) -> bool:
    """Owner (or superuser) has full read/write on a form, its versions and submissions."""
    user = get_actor(user)
    if user is None:
        return False
    if getattr(user, 'is_superuser', False):
        return True
    return form.created_by_id == user.id


def can_view_form(form: form_models.Form, user) -> bool:
    """Form metadata is readable by its owner, and by anyone when public."""
    return form.is_public or can_manage_form(form, user)


def can_submit(form: form_models.Form, user) -> bool:
    """Public forms accept anonymous submissions; private forms need a login."""
    return form.is_public or get_actor(user) is not None


def require_form_owner(form: form_models.Form, user) -> None:
    if get_actor(user) is None:
        raise AuthRequired()
    if not can_manage_form(form, user):
        raise AccessDenied('Only the form owner may do this.')


def require_form_view(form: form_models.Form, user) -> None:
    if can_view_form(form, user):
        return
    if get_actor(user) is None:
        raise AuthRequired()
    raise AccessDenied()

from datetime import date
from typing import Any, Dict, List

from formhub.exceptions import ValidationError
from forms.schema import (
    BooleanComponent,
    ChoiceComponent,
    Component,
    ContainerComponent,
    DateComponent,
    FormSchema,
    InputComponent,
    NumberComponent,
)


def _is_empty(value) -> bool:
    return value is None or value == '' or value == [] or value == {}


def _type_check(comp: Component, value) -> bool:
    if isinstance(comp, InputComponent):
        return isinstance(value, str)
    if isinstance(comp, NumberComponent):
        # bool is an int subclass; a checkbox value is not a number
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(comp, BooleanComponent):
        return isinstance(value, bool)
    if isinstance(comp, DateComponent):
        return isinstance(value, (str, date))
    if isinstance(comp, ChoiceComponent) and comp.type == 'selectboxes':
        return isinstance(value, dict) and all(isinstance(v, bool) for v in value.values())
    return True


def _check_component(comp: Component, value) -> str:
    if not _type_check(comp, value):
        return f'Invalid type for field {comp.key} (expected {comp.type}).'

    if isinstance(comp, InputComponent):
        if comp.max_length is not None and len(value) > comp.max_length:
            return f'Maximum length is {comp.max_length}.'
        if comp.min_length is not None and len(value) < comp.min_length:
            return f'Minimum length is {comp.min_length}.'

    if isinstance(comp, ChoiceComponent) and comp.values:
        if comp.type == 'selectboxes':
            unknown = [k for k in value if k not in comp.values]
            if unknown:
                return f'Invalid choice: {", ".join(sorted(map(str, unknown)))}.'
        elif comp.multiple:
            if not isinstance(value, list) or any(v not in comp.values for v in value):
                return f'Invalid choice: {value}.'
        elif value not in comp.values:
            return f'Invalid choice: {value}.'
    return ''


def _collect_errors(components: List[Component], data: Dict[str, Any]) -> Dict[str, Any]:
    errors = {}
    for comp in components:
        value = data.get(comp.key)
        if isinstance(comp, ContainerComponent):
            # children are validated even when the container object is absent
            if value is None:
                value = {}
            if not isinstance(value, dict):
                errors[comp.key] = f'Invalid type for field {comp.key} (expected object).'
                continue
            nested = _collect_errors(comp.data_components(), value)
            if nested:
                errors[comp.key] = nested
            continue

        if _is_empty(value):
            if comp.required:
                errors[comp.key] = 'This field is required.'
            continue
        message = _check_component(comp, value)
        if message:
            errors[comp.key] = message
    return errors


def validate_submission_data(schema: FormSchema, data: Any) -> Dict[str, Any]:
    """Validate a submission payload against a parsed schema.

    The payload is an object keyed by component key. Required components must
    be present and non-empty; present values are type checked per component
    kind. A container's children are checked against the object stored
    under the container key. Keys not declared by the schema (e.g. the submit
    button state) are accepted. Raises ValidationError with one message per
    offending key.
    """
    if not isinstance(data, dict):
        raise ValidationError({'data': 'Submission data must be an object.'})

    errors = _collect_errors(schema.data_components(), data)
    if errors:
        raise ValidationError({'data': errors})
    return data

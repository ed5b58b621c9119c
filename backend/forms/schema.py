"""Typed view over stored form schemas.

Schemas are persisted (and hashed) as the raw JSON document the builder
produces. This module parses that document into a small tagged union of
component kinds so the rest of the code can reason about inputs without
poking at untyped dicts. Component types this module does not know about are
kept as `UnknownComponent` so newer builder output still round-trips.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from formhub.exceptions import ValidationError

BLANK_SCHEMA: Dict[str, Any] = {
    'title': '',
    'name': '',
    'path': '',
    'display': 'form',
    'type': 'form',
    'components': [],
}

DISPLAY_MODES = ('form', 'wizard', 'pdf')

TEXT_TYPES = frozenset({'textfield', 'textarea', 'email', 'phoneNumber', 'password', 'url'})
NUMBER_TYPES = frozenset({'number', 'currency'})
BOOLEAN_TYPES = frozenset({'checkbox'})
CHOICE_TYPES = frozenset({'select', 'radio', 'selectboxes'})
DATE_TYPES = frozenset({'datetime', 'day', 'time'})
BUTTON_TYPES = frozenset({'button'})
LAYOUT_TYPES = frozenset({'panel', 'fieldset', 'columns', 'well'})
# nests its children's values under data[container.key]
CONTAINER_TYPES = frozenset({'container'})


def blank_schema() -> Dict[str, Any]:
    return copy.deepcopy(BLANK_SCHEMA)


def _int_limit(value) -> Optional[int]:
    # the builder writes '' for limits that were never set
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


@dataclass
class Component:
    type: str
    key: Optional[str]
    label: str = ''
    validate: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    # Components that store a value in the submission payload.
    holds_data = True

    @property
    def required(self) -> bool:
        return bool(self.validate.get('required'))

    def children(self) -> List['Component']:
        return []


@dataclass
class InputComponent(Component):
    @property
    def min_length(self) -> Optional[int]:
        return _int_limit(self.validate.get('minLength'))

    @property
    def max_length(self) -> Optional[int]:
        return _int_limit(self.validate.get('maxLength'))


@dataclass
class NumberComponent(Component):
    pass


@dataclass
class BooleanComponent(Component):
    pass


@dataclass
class ChoiceComponent(Component):
    values: List[Any] = field(default_factory=list)

    @property
    def multiple(self) -> bool:
        return self.type == 'selectboxes' or bool(self.raw.get('multiple'))


@dataclass
class DateComponent(Component):
    pass


@dataclass
class ButtonComponent(Component):
    holds_data = False


@dataclass
class LayoutComponent(Component):
    components: List[Component] = field(default_factory=list)
    holds_data = False

    def children(self) -> List[Component]:
        return self.components


@dataclass
class ContainerComponent(Component):
    """Data component whose value is an object keyed by its own children."""
    components: List[Component] = field(default_factory=list)

    def data_components(self) -> List[Component]:
        return [c for c in _walk(self.components) if c.holds_data]


@dataclass
class UnknownComponent(Component):
    """Any component type not modelled above. Never validated."""
    holds_data = False


def _walk(components: List[Component]) -> Iterator[Component]:
    """Depth-first over one data scope. Container children are not entered."""
    stack = list(reversed(components))
    while stack:
        comp = stack.pop()
        yield comp
        stack.extend(reversed(comp.children()))


@dataclass
class FormSchema:
    display: str
    components: List[Component]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def iter_components(self) -> Iterator[Component]:
        return _walk(self.components)

    def data_components(self) -> List[Component]:
        return [c for c in self.iter_components() if c.holds_data]


def _choice_values(raw: Dict[str, Any]) -> List[Any]:
    # select stores options under data.values, radio/selectboxes under values
    values = raw.get('values')
    if values is None and isinstance(raw.get('data'), dict):
        values = raw['data'].get('values')
    if not isinstance(values, list):
        return []
    out = []
    for item in values:
        if isinstance(item, dict) and 'value' in item:
            out.append(item['value'])
        else:
            out.append(item)
    return out


def _layout_children(raw: Dict[str, Any]) -> List[Any]:
    if raw.get('type') == 'columns':
        nested = []
        for col in raw.get('columns') or []:
            if isinstance(col, dict):
                nested.extend(col.get('components') or [])
        return nested
    return raw.get('components') or []


def _parse_component(raw: Any, path: str) -> Component:
    if not isinstance(raw, dict):
        raise ValidationError({path: 'Component must be an object.'})
    ctype = raw.get('type')
    if not isinstance(ctype, str) or not ctype:
        raise ValidationError({path: 'Component type is required.'})

    key = raw.get('key')
    validate = raw.get('validate') if isinstance(raw.get('validate'), dict) else {}
    common = {
        'type': ctype,
        'key': key if isinstance(key, str) else None,
        'label': raw.get('label') or '',
        'validate': validate,
        'raw': raw,
    }

    if ctype in LAYOUT_TYPES:
        children = _layout_children(raw)
        if not isinstance(children, list):
            raise ValidationError({path: 'Nested components must be a list.'})
        nested = [_parse_component(c, f'{path}.{i}') for i, c in enumerate(children)]
        return LayoutComponent(components=nested, **common)
    if ctype in BUTTON_TYPES:
        return ButtonComponent(**common)

    if ctype in CONTAINER_TYPES:
        if not common['key']:
            raise ValidationError({path: 'Container components require a key.'})
        children = raw.get('components') or []
        if not isinstance(children, list):
            raise ValidationError({path: 'Nested components must be a list.'})
        nested = [_parse_component(c, f'{path}.{i}') for i, c in enumerate(children)]
        return ContainerComponent(components=nested, **common)

    known = TEXT_TYPES | NUMBER_TYPES | BOOLEAN_TYPES | CHOICE_TYPES | DATE_TYPES
    if ctype not in known:
        return UnknownComponent(**common)

    if not common['key']:
        raise ValidationError({path: f'Component of type {ctype} requires a key.'})
    if ctype in TEXT_TYPES:
        return InputComponent(**common)
    if ctype in NUMBER_TYPES:
        return NumberComponent(**common)
    if ctype in BOOLEAN_TYPES:
        return BooleanComponent(**common)
    if ctype in CHOICE_TYPES:
        return ChoiceComponent(values=_choice_values(raw), **common)
    return DateComponent(**common)


def _check_unique_keys(components: List[Component], prefix: str = '') -> None:
    seen = set()
    for comp in components:
        if comp.key in seen:
            raise ValidationError({'schema': f'Duplicate component key: {prefix}{comp.key}.'})
        seen.add(comp.key)
        if isinstance(comp, ContainerComponent):
            _check_unique_keys(comp.data_components(), f'{prefix}{comp.key}.')


def parse_schema(raw: Any) -> FormSchema:
    """Parse a stored schema document, raising ValidationError when malformed."""
    if not isinstance(raw, dict):
        raise ValidationError({'schema': 'Schema must be an object.'})
    components = raw.get('components')
    if not isinstance(components, list):
        raise ValidationError({'schema': 'Schema components must be a list.'})
    display = raw.get('display', 'form')
    if display not in DISPLAY_MODES:
        raise ValidationError({'schema': f'Unsupported display mode: {display}.'})

    parsed = [_parse_component(c, f'components.{i}') for i, c in enumerate(components)]
    schema = FormSchema(display=display, components=parsed, raw=raw)

    _check_unique_keys(schema.data_components())
    return schema

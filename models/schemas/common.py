import re

from marshmallow import fields, ValidationError

_WHITESPACE_RE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Lower-case the name and replace each whitespace run with '-'."""
    return _WHITESPACE_RE.sub("-", name.strip().lower())


def non_empty(value: str) -> None:
    if not value:
        raise ValidationError("Must be a non-empty string.")


class Trimmed(fields.String):
    """String field that strips surrounding whitespace on load."""

    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs)
        return value.strip()


def required_text(**kwargs):
    return Trimmed(required=True, validate=non_empty, **kwargs)


def keyword_list(**kwargs):
    return fields.List(Trimmed(validate=non_empty), load_default=list, **kwargs)

from marshmallow import Schema, EXCLUDE, ValidationError


def camelcase(s: str) -> str:
    parts = iter(s.split("_"))
    return next(parts) + "".join(p.title() for p in parts)


def not_blank(value: str) -> None:
    if not value.strip():
        raise ValidationError("Must not be blank.")


class CamelCaseSchema(Schema):
    """Schema that uses camelCase keys on the wire and snake_case attributes in Python."""

    def on_bind_field(self, field_name, field_obj):
        field_obj.data_key = camelcase(field_obj.data_key or field_name)


class QuerySchema(CamelCaseSchema):
    """Query-string schema; ignores parameters it does not know about."""

    class Meta:
        unknown = EXCLUDE

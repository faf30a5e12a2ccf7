from marshmallow import fields, validate

from models.schemas.common import CamelCaseSchema, not_blank

_name = validate.And(validate.Length(max=64), not_blank)
_color = validate.Regexp(r"^#[0-9A-Fa-f]{6}$", error="Color must look like #RRGGBB.")


class CategoryCreateSchema(CamelCaseSchema):
    name = fields.String(required=True, validate=_name)
    icon = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=16))
    color = fields.String(load_default=None, allow_none=True, validate=_color)


class CategoryUpdateSchema(CamelCaseSchema):
    name = fields.String(validate=_name)
    icon = fields.String(allow_none=True, validate=validate.Length(max=16))
    color = fields.String(allow_none=True, validate=_color)


class CategorySummarySchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    icon = fields.String(allow_none=True)
    color = fields.String(allow_none=True)


class CategoryOutSchema(CategorySummarySchema):
    is_default = fields.Boolean()
    user_id = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

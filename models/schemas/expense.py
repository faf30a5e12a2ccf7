from marshmallow import fields, validate, validates_schema, ValidationError

from models.schemas.common import CamelCaseSchema, QuerySchema, not_blank
from models.schemas.category import CategorySummarySchema

MAX_LIMIT = 100

_positive = validate.Range(min=0, min_inclusive=False, error="Amount must be greater than 0.")
_name = validate.And(validate.Length(max=255), not_blank)


class ExpenseCreateSchema(CamelCaseSchema):
    name = fields.String(required=True, validate=_name)
    amount = fields.Decimal(required=True, places=2, validate=_positive)
    category_id = fields.String(required=True)
    date = fields.Date(required=True)
    notes = fields.String(load_default=None, allow_none=True)


class ExpenseUpdateSchema(CamelCaseSchema):
    name = fields.String(validate=_name)
    amount = fields.Decimal(places=2, validate=_positive)
    category_id = fields.String()
    date = fields.Date()
    notes = fields.String(allow_none=True)


class ExpenseQuerySchema(QuerySchema):
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=MAX_LIMIT))
    start_date = fields.Date(load_default=None)
    end_date = fields.Date(load_default=None)
    category_id = fields.String(load_default=None)
    search = fields.String(load_default=None)

    @validates_schema
    def validate_range(self, data, **kwargs):
        if data.get("start_date") and data.get("end_date") and data["end_date"] < data["start_date"]:
            raise ValidationError("endDate must not be before startDate.", "endDate")


class RecentQuerySchema(QuerySchema):
    limit = fields.Integer(load_default=5, validate=validate.Range(min=1, max=50))


class ExpenseOutSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    amount = fields.Float()
    category_id = fields.String()
    user_id = fields.String()
    date = fields.Date()
    notes = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    category = fields.Nested(CategorySummarySchema)

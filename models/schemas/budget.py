from marshmallow import fields, validate, validates_schema, ValidationError

from models.budget import BudgetPeriod
from models.schemas.common import CamelCaseSchema, QuerySchema

_positive = validate.Range(min=0, min_inclusive=False, error="Amount must be greater than 0.")


class BudgetCreateSchema(CamelCaseSchema):
    amount = fields.Decimal(required=True, places=2, validate=_positive)
    period_type = fields.Enum(BudgetPeriod, required=True)
    start_date = fields.Date(required=True)
    end_date = fields.Date(required=True)
    is_active = fields.Boolean(load_default=True)

    @validates_schema
    def validate_range(self, data, **kwargs):
        if data["end_date"] < data["start_date"]:
            raise ValidationError("endDate must not be before startDate.", "endDate")


class BudgetUpdateSchema(CamelCaseSchema):
    amount = fields.Decimal(places=2, validate=_positive)
    period_type = fields.Enum(BudgetPeriod)
    start_date = fields.Date()
    end_date = fields.Date()
    is_active = fields.Boolean()


class BudgetQuerySchema(QuerySchema):
    is_active = fields.Boolean(load_default=None, allow_none=True)


class BudgetOutSchema(CamelCaseSchema):
    id = fields.String()
    user_id = fields.String()
    amount = fields.Float()
    period_type = fields.Enum(BudgetPeriod)
    start_date = fields.Date()
    end_date = fields.Date()
    is_active = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class BudgetStatusSchema(BudgetOutSchema):
    spent_amount = fields.Float()
    remaining_amount = fields.Float()
    percentage = fields.Float()
    days_remaining = fields.Integer()
    is_over_budget = fields.Boolean()

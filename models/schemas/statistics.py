from marshmallow import fields, validate, validates_schema, ValidationError

from models.schemas.common import QuerySchema


class DateRangeQuerySchema(QuerySchema):
    start_date = fields.Date(load_default=None)
    end_date = fields.Date(load_default=None)

    @validates_schema
    def validate_range(self, data, **kwargs):
        if data.get("start_date") and data.get("end_date") and data["end_date"] < data["start_date"]:
            raise ValidationError("endDate must not be before startDate.", "endDate")


class MonthlyQuerySchema(QuerySchema):
    months = fields.Integer(load_default=6, validate=validate.Range(min=1, max=24))

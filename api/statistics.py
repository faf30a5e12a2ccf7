from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.statistics import DateRangeQuerySchema, MonthlyQuerySchema
from services.statistics_service import StatisticsService
from services.token_validators import AccessTokenValidator
from utils.decorators import access_token_required

range_schema = DateRangeQuerySchema()
monthly_schema = MonthlyQuerySchema()


def create_blueprint(statistics_service: StatisticsService, access_validator: AccessTokenValidator) -> Blueprint:
    bp = Blueprint("statistics", __name__, url_prefix="/statistics")
    auth_required = access_token_required(access_validator)

    @bp.get("/dashboard")
    @auth_required
    def dashboard():
        """
        Today/week/month totals, top categories, recent expenses and current budget
        ---
        tags: [Statistics]
        security:
          - Bearer: []
        responses:
          200: { description: OK }
        """
        return jsonify(statistics_service.get_dashboard(g.principal.sub))

    @bp.get("/daily")
    @auth_required
    def daily():
        """
        Totals per day (defaults to the last 30 days)
        ---
        tags: [Statistics]
        security:
          - Bearer: []
        parameters:
          - { in: query, name: startDate, type: string, format: date }
          - { in: query, name: endDate, type: string, format: date }
        responses:
          200: { description: OK }
        """
        q = range_schema.load(request.args)
        return jsonify(statistics_service.get_daily_statistics(g.principal.sub, q["start_date"], q["end_date"]))

    @bp.get("/monthly")
    @auth_required
    def monthly():
        """
        Totals per month, newest first
        ---
        tags: [Statistics]
        security:
          - Bearer: []
        parameters:
          - { in: query, name: months, type: integer, default: 6 }
        responses:
          200: { description: OK }
        """
        q = monthly_schema.load(request.args)
        return jsonify(statistics_service.get_monthly_statistics(g.principal.sub, q["months"]))

    @bp.get("/categories")
    @auth_required
    def categories():
        """
        Totals per category with their share of the total
        ---
        tags: [Statistics]
        security:
          - Bearer: []
        parameters:
          - { in: query, name: startDate, type: string, format: date }
          - { in: query, name: endDate, type: string, format: date }
        responses:
          200: { description: OK }
        """
        q = range_schema.load(request.args)
        return jsonify(statistics_service.get_category_statistics(g.principal.sub, q["start_date"], q["end_date"]))

    return bp

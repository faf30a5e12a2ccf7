from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.budget import BudgetCreateSchema, BudgetUpdateSchema, BudgetQuerySchema
from services.budget_service import BudgetService
from services.token_validators import AccessTokenValidator
from utils.decorators import access_token_required

create_schema = BudgetCreateSchema()
update_schema = BudgetUpdateSchema()
query_schema = BudgetQuerySchema()


def create_blueprint(budget_service: BudgetService, access_validator: AccessTokenValidator) -> Blueprint:
    bp = Blueprint("budgets", __name__)
    auth_required = access_token_required(access_validator)

    @bp.post("/budgets")
    @auth_required
    def create_budget():
        """
        Create a budget
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        parameters:
          - in: body
            name: body
            required: true
            schema:
              type: object
              required: [amount, periodType, startDate, endDate]
              properties:
                amount: { type: number }
                periodType: { type: string, enum: [WEEKLY, MONTHLY, YEARLY] }
                startDate: { type: string, format: date }
                endDate: { type: string, format: date }
                isActive: { type: boolean }
        responses:
          201: { description: Created }
          422: { description: Validation error }
        """
        data = create_schema.load(request.get_json(silent=True) or {})
        return jsonify(budget_service.create(g.principal.sub, data)), 201

    @bp.get("/budgets")
    @auth_required
    def list_budgets():
        """
        List budgets
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        parameters:
          - { in: query, name: isActive, type: boolean }
        responses:
          200: { description: OK }
        """
        query = query_schema.load(request.args)
        return jsonify(budget_service.find_all(g.principal.sub, query["is_active"]))

    @bp.get("/budgets/current")
    @auth_required
    def current_budget():
        """
        Status of the active budget covering today (null when there is none)
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        responses:
          200: { description: OK }
        """
        return jsonify(budget_service.find_current(g.principal.sub))

    @bp.get("/budgets/<budget_id>")
    @auth_required
    def get_budget(budget_id: str):
        """
        Get a budget by id
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: budget_id, type: string, required: true }
        responses:
          200: { description: OK }
          404: { description: Not found }
        """
        return jsonify(budget_service.find_one(budget_id, g.principal.sub))

    @bp.get("/budgets/<budget_id>/status")
    @auth_required
    def budget_status(budget_id: str):
        """
        Spending against a budget
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: budget_id, type: string, required: true }
        responses:
          200: { description: OK }
          404: { description: Not found }
        """
        return jsonify(budget_service.get_status(budget_id, g.principal.sub))

    @bp.patch("/budgets/<budget_id>")
    @auth_required
    def update_budget(budget_id: str):
        """
        Update a budget (partial)
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: budget_id, type: string, required: true }
          - in: body
            name: body
            schema:
              type: object
              properties:
                amount: { type: number }
                periodType: { type: string, enum: [WEEKLY, MONTHLY, YEARLY] }
                startDate: { type: string, format: date }
                endDate: { type: string, format: date }
                isActive: { type: boolean }
        responses:
          200: { description: OK }
          404: { description: Not found }
          422: { description: Validation error }
        """
        data = update_schema.load(request.get_json(silent=True) or {})
        return jsonify(budget_service.update(budget_id, g.principal.sub, data))

    @bp.delete("/budgets/<budget_id>")
    @auth_required
    def delete_budget(budget_id: str):
        """
        Delete a budget
        ---
        tags: [Budgets]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: budget_id, type: string, required: true }
        responses:
          200: { description: Deleted }
          404: { description: Not found }
        """
        return jsonify(budget_service.remove(budget_id, g.principal.sub))

    return bp

from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.expense import (
    ExpenseCreateSchema,
    ExpenseUpdateSchema,
    ExpenseQuerySchema,
    RecentQuerySchema,
)
from services.expense_service import ExpenseService
from services.token_validators import AccessTokenValidator
from utils.decorators import access_token_required

create_schema = ExpenseCreateSchema()
update_schema = ExpenseUpdateSchema()
query_schema = ExpenseQuerySchema()
recent_schema = RecentQuerySchema()


def create_blueprint(expense_service: ExpenseService, access_validator: AccessTokenValidator) -> Blueprint:
    bp = Blueprint("expenses", __name__)
    auth_required = access_token_required(access_validator)

    @bp.post("/expenses")
    @auth_required
    def create_expense():
        """
        Record an expense
        ---
        tags: [Expenses]
        security:
          - Bearer: []
        consumes: [application/json]
        parameters:
          - in: body
            name: body
            required: true
            schema:
              type: object
              required: [name, amount, categoryId, date]
              properties:
                name: { type: string }
                amount: { type: number, example: 15.5 }
                categoryId: { type: string }
                date: { type: string, format: date }
                notes: { type: string }
        responses:
          201: { description: Created }
          404: { description: Category not found }
          422: { description: Validation error }
        """
        data = create_schema.load(request.get_json(silent=True) or {})
        return jsonify(expense_service.create(g.principal.sub, data)), 201

    @bp.get("/expenses")
    @auth_required
    def list_expenses():
        """
        List expenses (pagination, date range, category, name search)
        ---
        tags: [Expenses]
        security:
          - Bearer: []
        parameters:
          - { in: query, name: page, type: integer, default: 1 }
          - { in: query, name: limit, type: integer, default: 10 }
          - { in: query, name: startDate, type: string, format: date }
          - { in: query, name: endDate, type: string, format: date }
          - { in: query, name: categoryId, type: string }
          - { in: query, name: search, type: string }
        responses:
          200: { description: OK }
        """
        query = query_schema.load(request.args)
        return jsonify(expense_service.find_all(g.principal.sub, query))

    @bp.get("/expenses/recent")
    @auth_required
    def recent_expenses():
        """
        Most recent expenses
        ---
        tags: [Expenses]
        security:
          - Bearer: []
        parameters:
          - { in: query, name: limit, type: integer, default: 5 }
        responses:
          200: { description: OK }
        """
        query = recent_schema.load(request.args)
        return jsonify(expense_service.find_recent(g.principal.sub, query["limit"]))

    @bp.get("/expenses/<expense_id>")
    @auth_required
    def get_expense(expense_id: str):
        """
        Get an expense by id
        ---
        tags: [Expenses]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: expense_id, type: string, required: true }
        responses:
          200: { description: OK }
          404: { description: Not found }
        """
        return jsonify(expense_service.find_one(expense_id, g.principal.sub))

    @bp.patch("/expenses/<expense_id>")
    @auth_required
    def update_expense(expense_id: str):
        """
        Update an expense (partial)
        ---
        tags: [Expenses]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: expense_id, type: string, required: true }
          - in: body
            name: body
            schema:
              type: object
              properties:
                name: { type: string }
                amount: { type: number }
                categoryId: { type: string }
                date: { type: string, format: date }
                notes: { type: string }
        responses:
          200: { description: OK }
          404: { description: Not found }
        """
        data = update_schema.load(request.get_json(silent=True) or {})
        return jsonify(expense_service.update(expense_id, g.principal.sub, data))

    @bp.delete("/expenses/<expense_id>")
    @auth_required
    def delete_expense(expense_id: str):
        """
        Delete an expense
        ---
        tags: [Expenses]
        security:
          - Bearer: []
        parameters:
          - { in: path, name: expense_id, type: string, required: true }
        responses:
          200: { description: Deleted }
          404: { description: Not found }
        """
        return jsonify(expense_service.remove(expense_id, g.principal.sub))

    return bp

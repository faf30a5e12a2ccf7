from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.category import CategoryCreateSchema, CategoryUpdateSchema
from services.category_service import CategoryService
from services.token_validators import AccessTokenValidator
from utils.decorators import access_token_required

create_schema = CategoryCreateSchema()
update_schema = CategoryUpdateSchema()


def create_blueprint(category_service: CategoryService, access_validator: AccessTokenValidator) -> Blueprint:
    bp = Blueprint("categories", __name__)
    auth_required = access_token_required(access_validator)

    @bp.post("/categories")
    @auth_required
    def create_category():
        """
        Create a category
        ---
        tags: [Categories]
        security:
          - Bearer: []
        consumes: [application/json]
        parameters:
          - in: body
            name: body
            required: true
            schema:
              type: object
              properties:
                name: { type: string, maxLength: 64 }
                icon: { type: string }
                color: { type: string, example: "#FF6B6B" }
        responses:
          201: { description: Created }
          409: { description: Name already exists }
          422: { description: Validation error }
        """
        data = create_schema.load(request.get_json(silent=True) or {})
        return jsonify(category_service.create(g.principal.sub, data)), 201

    @bp.get("/categories")
    @auth_required
    def list_categories():
        """
        List default categories plus the caller's own
        ---
        tags: [Categories]
        security:
          - Bearer: []
        responses:
          200: { description: OK }
        """
        return jsonify(category_service.find_all(g.principal.sub))

    @bp.get("/categories/<category_id>")
    @auth_required
    def get_category(category_id: str):
        """
        Get a category by id
        ---
        tags: [Categories]
        security:
          - Bearer: []
        parameters:
          - in: path
            name: category_id
            type: string
            required: true
        responses:
          200: { description: OK }
          404: { description: Not found }
        """
        return jsonify(category_service.find_one(category_id, g.principal.sub))

    @bp.patch("/categories/<category_id>")
    @auth_required
    def update_category(category_id: str):
        """
        Update a category (partial)
        ---
        tags: [Categories]
        security:
          - Bearer: []
        parameters:
          - in: path
            name: category_id
            type: string
            required: true
          - in: body
            name: body
            required: true
            schema:
              type: object
              properties:
                name: { type: string, maxLength: 64 }
                icon: { type: string }
                color: { type: string }
        responses:
          200: { description: OK }
          403: { description: Default category }
          404: { description: Not found }
          409: { description: Name already exists }
        """
        data = update_schema.load(request.get_json(silent=True) or {})
        return jsonify(category_service.update(category_id, g.principal.sub, data))

    @bp.delete("/categories/<category_id>")
    @auth_required
    def delete_category(category_id: str):
        """
        Delete a category
        ---
        tags: [Categories]
        security:
          - Bearer: []
        parameters:
          - in: path
            name: category_id
            type: string
            required: true
        responses:
          200: { description: Deleted }
          403: { description: Default category }
          404: { description: Not found }
          409: { description: Category still has expenses }
        """
        return jsonify(category_service.remove(category_id, g.principal.sub))

    return bp

from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.user import UserUpdateSchema, ChangePasswordSchema, DeleteAccountSchema
from services.token_validators import AccessTokenValidator
from services.user_service import UserService
from utils.decorators import access_token_required

update_schema = UserUpdateSchema()
change_password_schema = ChangePasswordSchema()
delete_account_schema = DeleteAccountSchema()


def create_blueprint(user_service: UserService, access_validator: AccessTokenValidator) -> Blueprint:
    bp = Blueprint("users", __name__, url_prefix="/users")
    auth_required = access_token_required(access_validator)

    @bp.get("/profile")
    @auth_required
    def get_profile():
        """
        Get current user info.
        ---
        tags:
          - Users
        security:
          - Bearer: []
        responses:
          200:
            description: OK
          401:
            description: Unauthorized
        """
        return jsonify(user_service.get_profile(g.principal.sub)), 200

    @bp.patch("/profile")
    @auth_required
    def update_profile():
        """
        Update username and/or email.
        ---
        tags:
          - Users
        security:
          - Bearer: []
        parameters:
          - in: body
            name: body
            schema:
              type: object
              properties:
                username: { type: string }
                email: { type: string }
        responses:
          200: { description: OK }
          409: { description: Email or username already exists }
          422: { description: Validation error }
        """
        data = update_schema.load(request.get_json(silent=True) or {})
        return jsonify(user_service.update_profile(g.principal.sub, data)), 200

    @bp.post("/change-password")
    @auth_required
    def change_password():
        """
        Change password; signs the user out of every session.
        ---
        tags:
          - Users
        security:
          - Bearer: []
        parameters:
          - in: body
            name: body
            schema:
              type: object
              properties:
                currentPassword: { type: string }
                newPassword: { type: string, minLength: 8 }
        responses:
          200: { description: OK }
          401: { description: Current password is incorrect }
        """
        data = change_password_schema.load(request.get_json(silent=True) or {})
        result = user_service.change_password(g.principal.sub, data["current_password"], data["new_password"])
        return jsonify(result), 200

    @bp.delete("/account")
    @auth_required
    def delete_account():
        """
        Delete the account and everything it owns.
        ---
        tags:
          - Users
        security:
          - Bearer: []
        parameters:
          - in: body
            name: body
            schema:
              type: object
              properties:
                password: { type: string }
        responses:
          200: { description: Deleted }
          401: { description: Password is incorrect }
        """
        data = delete_account_schema.load(request.get_json(silent=True) or {})
        return jsonify(user_service.delete_account(g.principal.sub, data["password"])), 200

    return bp

"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh   (refresh token in body)
- POST /auth/logout    (access token)
- GET  /auth/profile   (access token)

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed with two secrets)
- Stores refresh tokens in DB (RefreshToken model) so they can be revoked and rotated
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.user import RegisterSchema, LoginSchema, LogoutSchema
from services.auth_service import AuthService
from services.token_validators import AccessTokenValidator, RefreshTokenValidator
from utils.decorators import access_token_required, refresh_token_required

register_schema = RegisterSchema()
login_schema = LoginSchema()
logout_schema = LogoutSchema()


def create_blueprint(
    auth_service: AuthService,
    access_validator: AccessTokenValidator,
    refresh_validator: RefreshTokenValidator,
) -> Blueprint:
    bp = Blueprint("auth", __name__, url_prefix="/auth")

    @bp.post("/register")
    def register():
        """
        Register a new user.
        ---
        tags:
          - Auth
        consumes:
          - application/json
        parameters:
          - in: body
            name: body
            schema:
              type: object
              required: [username, email, password]
              properties:
                username: { type: string }
                email: { type: string }
                password: { type: string, minLength: 8 }
        responses:
          201:
            description: Created (returns user and tokens)
          409:
            description: Email or username already exists
          422:
            description: Validation error
        """
        data = register_schema.load(request.get_json(silent=True) or {})
        result = auth_service.register(data["username"], data["email"], data["password"])
        return jsonify(result), 201

    @bp.post("/login")
    def login():
        """
        Login: return user, accessToken and refreshToken
        ---
        tags:
          - Auth
        consumes:
          - application/json
        parameters:
          -  in: body
             name: body
             schema:
               type: object
               properties:
                 emailOrUsername: { type: string }
                 password: { type: string }
        responses:
          200:
            description: OK (returns tokens)
          401:
            description: Unauthorized
        """
        data = login_schema.load(request.get_json(silent=True) or {})
        return jsonify(auth_service.login(data["email_or_username"], data["password"])), 200

    @bp.post("/refresh")
    @refresh_token_required(refresh_validator)
    def refresh():
        """
        Exchange a refresh token for a new pair (rotation). The old token stops working.
        ---
        tags:
          - Auth
        consumes:
          - application/json
        parameters:
          -  in: body
             name: body
             schema:
               type: object
               properties:
                 refreshToken: { type: string }
        responses:
          200:
            description: OK (returns accessToken and refreshToken)
          401:
            description: Unauthorized
        """
        principal = g.principal
        return jsonify(auth_service.refresh(principal.sub, principal.refresh_token)), 200

    @bp.post("/logout")
    @access_token_required(access_validator)
    def logout():
        """
        Logout: revokes the given refresh token, or all of them when omitted
        ---
        tags:
          - Auth
        security:
          - Bearer: []
        consumes:
          - application/json
        parameters:
          -  in: body
             name: body
             schema:
               type: object
               properties:
                 refreshToken: { type: string }
        responses:
          200:
            description: Logged out
          401:
            description: Unauthorized
        """
        data = logout_schema.load(request.get_json(silent=True) or {})
        auth_service.logout(g.principal.sub, data.get("refresh_token"))
        return jsonify({"message": "Logged out successfully"}), 200

    @bp.get("/profile")
    @access_token_required(access_validator)
    def profile():
        """
        Current user profile
        ---
        tags:
          - Auth
        security:
          - Bearer: []
        responses:
          200:
            description: OK
          401:
            description: Unauthorized
        """
        return jsonify(auth_service.get_profile(g.principal.sub)), 200

    return bp

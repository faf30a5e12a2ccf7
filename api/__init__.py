from __future__ import annotations

import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, check_config
from .errors import register_error_handlers
from models.db_storage import DBStorage
from services.auth_service import AuthService
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.expense_service import ExpenseService
from services.statistics_service import StatisticsService
from services.token_validators import AccessTokenValidator, RefreshTokenValidator
from services.tokens import TokenIssuer
from services.user_service import UserService

API_PREFIX = "/api/v1"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Finance Tracker API",
        "version": "1.0.0",
        "description": "REST API for tracking expenses, categories and budgets, with spending statistics.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the access token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    Storage, the token issuer, the two token validators and the services are
    built once here and handed to the blueprint factories; handlers never look
    them up from a global.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    check_config(app.config)
    configure_logging(app.config["LOG_LEVEL"])

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    tokens = TokenIssuer.from_config(app.config)
    access_validator = AccessTokenValidator(storage, tokens)
    refresh_validator = RefreshTokenValidator(storage, tokens)

    category_service = CategoryService(storage)
    category_service.ensure_defaults(app.config.get("DEFAULT_CATEGORIES", []))
    storage.close()
    expense_service = ExpenseService(storage, category_service)
    budget_service = BudgetService(storage)

    from . import auth, budgets, categories, expenses, health, statistics, users

    app.register_blueprint(health.create_blueprint(storage), url_prefix=API_PREFIX)
    app.register_blueprint(
        auth.create_blueprint(AuthService(storage, tokens), access_validator, refresh_validator),
        url_prefix=f"{API_PREFIX}/auth",
    )
    app.register_blueprint(
        users.create_blueprint(UserService(storage), access_validator), url_prefix=f"{API_PREFIX}/users"
    )
    app.register_blueprint(categories.create_blueprint(category_service, access_validator), url_prefix=API_PREFIX)
    app.register_blueprint(expenses.create_blueprint(expense_service, access_validator), url_prefix=API_PREFIX)
    app.register_blueprint(budgets.create_blueprint(budget_service, access_validator), url_prefix=API_PREFIX)
    app.register_blueprint(
        statistics.create_blueprint(StatisticsService(storage, expense_service, budget_service), access_validator),
        url_prefix=f"{API_PREFIX}/statistics",
    )

    app.extensions["storage"] = storage

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Finance Tracker API",
            "docs": "/apidocs/",
            "health": f"{API_PREFIX}/health",
        }, 200

    return app

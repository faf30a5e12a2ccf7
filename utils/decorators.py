from __future__ import annotations
from functools import wraps
from flask import request, g


def _authenticated_by(validator):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            # raises UnauthorizedError; api.errors turns it into a 401
            g.principal = validator.authenticate(request)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def access_token_required(validator):
    """
    Require a valid bearer access token.
    The authenticated Principal is available as g.principal.
    """
    return _authenticated_by(validator)


def refresh_token_required(validator):
    """
    Require a valid refresh token in the JSON body ({"refreshToken": ...}).
    The RefreshPrincipal (identity plus the raw token) is available as g.principal.
    """
    return _authenticated_by(validator)

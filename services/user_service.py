from __future__ import annotations

import logging

from sqlalchemy import func, or_

from models.budget import Budget
from models.category import Category
from models.expense import Expense
from models.refresh_token import RefreshToken
from models.user import User
from models.schemas.user import UserOutSchema
from services.errors import ConflictError, NotFoundError, UnauthorizedError
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

user_out_schema = UserOutSchema()


class UserService:
    def __init__(self, storage):
        self.storage = storage

    def _get_user(self, user_id: str) -> User:
        user = self.storage.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_profile(self, user_id: str) -> dict:
        return user_out_schema.dump(self._get_user(user_id))

    def update_profile(self, user_id: str, data: dict) -> dict:
        user = self._get_user(user_id)
        session = self.storage.get_session()

        clauses = []
        if "email" in data and data["email"] != user.email:
            clauses.append(User.email == data["email"])
        if "username" in data and data["username"].lower() != user.username.lower():
            clauses.append(func.lower(User.username) == data["username"].lower())
        if clauses and session.query(User).filter(User.id != user.id, or_(*clauses)).first():
            raise ConflictError("Email or username already exists")

        for key in ("email", "username"):
            if key in data:
                setattr(user, key, data[key])
        self.storage.save()
        return user_out_schema.dump(user)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> dict:
        """Swap the password hash and sign the user out everywhere."""
        user = self._get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        session = self.storage.get_session()
        session.query(RefreshToken).filter(RefreshToken.user_id == user.id).delete(synchronize_session=False)
        self.storage.save()
        logger.info("User %s changed password", user.id)
        return {"message": "Password changed successfully"}

    def delete_account(self, user_id: str, password: str) -> dict:
        user = self._get_user(user_id)
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError("Password is incorrect")

        # Expenses first: they RESTRICT the deletion of categories
        session = self.storage.get_session()
        for cls in (Expense, Budget, Category, RefreshToken):
            session.query(cls).filter(cls.user_id == user.id).delete(synchronize_session=False)
        self.storage.delete(user)
        self.storage.save()
        logger.info("User %s deleted their account", user_id)
        return {"message": "Account deleted successfully"}

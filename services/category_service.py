from __future__ import annotations

import logging
from typing import Iterable, Mapping

from sqlalchemy import func, or_

from models.category import Category
from models.expense import Expense
from models.schemas.category import CategoryOutSchema
from services.errors import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

out_schema = CategoryOutSchema()
out_list_schema = CategoryOutSchema(many=True)


def visible_to(user_id: str):
    """Filter clause: the user's own categories plus the shared defaults."""
    return or_(Category.user_id == user_id, Category.is_default.is_(True))


class CategoryService:
    def __init__(self, storage):
        self.storage = storage

    def ensure_defaults(self, defaults: Iterable[Mapping[str, str]]) -> int:
        """Create any missing shared default category; returns how many were added."""
        session = self.storage.get_session()
        existing = {
            name.lower()
            for (name,) in session.query(Category.name).filter(Category.is_default.is_(True))
        }
        added = 0
        for item in defaults:
            if item["name"].lower() in existing:
                continue
            self.storage.new(
                Category(name=item["name"], icon=item.get("icon"), color=item.get("color"), is_default=True)
            )
            added += 1
        if added:
            self.storage.save()
            logger.info("Seeded %d default categories", added)
        return added

    def _name_taken(self, user_id: str, name: str, exclude_id: str | None = None) -> bool:
        session = self.storage.get_session()
        q = session.query(Category).filter(visible_to(user_id), func.lower(Category.name) == name.strip().lower())
        if exclude_id:
            q = q.filter(Category.id != exclude_id)
        return session.query(q.exists()).scalar()

    def get_visible(self, category_id: str, user_id: str) -> Category:
        session = self.storage.get_session()
        c = session.query(Category).filter(Category.id == category_id, visible_to(user_id)).first()
        if c is None:
            raise NotFoundError("Category not found")
        return c

    def _get_owned(self, category_id: str, user_id: str) -> Category:
        c = self.get_visible(category_id, user_id)
        if c.is_default:
            raise ForbiddenError("Default categories cannot be modified")
        return c

    def create(self, user_id: str, data: dict) -> dict:
        if self._name_taken(user_id, data["name"]):
            raise ConflictError("Category name already exists.")
        c = Category(
            name=data["name"].strip(),
            icon=data.get("icon"),
            color=data.get("color"),
            user_id=user_id,
            is_default=False,
        )
        self.storage.new(c)
        self.storage.save()
        return out_schema.dump(c)

    def find_all(self, user_id: str) -> list:
        session = self.storage.get_session()
        rows = (
            session.query(Category)
            .filter(visible_to(user_id))
            .order_by(Category.is_default.desc(), Category.name.asc())
            .all()
        )
        return out_list_schema.dump(rows)

    def find_one(self, category_id: str, user_id: str) -> dict:
        return out_schema.dump(self.get_visible(category_id, user_id))

    def update(self, category_id: str, user_id: str, data: dict) -> dict:
        c = self._get_owned(category_id, user_id)
        if "name" in data:
            if self._name_taken(user_id, data["name"], exclude_id=c.id):
                raise ConflictError("Category name already exists.")
            c.name = data["name"].strip()
        for key in ("icon", "color"):
            if key in data:
                setattr(c, key, data[key])
        self.storage.save()
        return out_schema.dump(c)

    def remove(self, category_id: str, user_id: str) -> dict:
        c = self._get_owned(category_id, user_id)
        session = self.storage.get_session()
        in_use = session.query(session.query(Expense).filter(Expense.category_id == c.id).exists()).scalar()
        if in_use:
            raise ConflictError("Category still has expenses.")
        self.storage.delete(c)
        self.storage.save()
        return {"message": "Category deleted successfully"}

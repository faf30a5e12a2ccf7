"""
SQLAlchemy models. Importing this package registers every table on Base.metadata.
"""
from models.base_model import Base
from models.user import User
from models.refresh_token import RefreshToken
from models.category import Category
from models.expense import Expense
from models.budget import Budget, BudgetPeriod
from models.db_storage import DBStorage

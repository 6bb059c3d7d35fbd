# backend/app/api/dependencies/database.py
"""
Database-related dependencies.

Re-exports ``app.database.get_db`` itself so ``dependency_overrides[get_db]``
in tests replaces every use.
"""

from ...database import get_db

__all__ = ["get_db"]

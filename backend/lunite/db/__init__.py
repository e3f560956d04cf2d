"""Database utilities and models."""

from lunite.db.base import Base
from lunite.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]

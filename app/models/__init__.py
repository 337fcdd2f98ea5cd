"""ORM models package - exports all models and Base."""

from app.database import Base
from app.models.rank_item import RankItem

__all__ = [
    "Base",
    "RankItem",
]

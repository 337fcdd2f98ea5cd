"""Repository layer - storage interfaces and implementations."""

from app.repositories.rank_items import (
    InMemoryRankItemRepository,
    RankItemRepository,
    SqlRankItemRepository,
)

__all__ = [
    "InMemoryRankItemRepository",
    "RankItemRepository",
    "SqlRankItemRepository",
]

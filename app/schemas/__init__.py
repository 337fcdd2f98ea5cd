"""Request/response schemas."""

from app.schemas.rank_item import (
    MessageOut,
    RankItemData,
    RankItemOut,
    ValidationResult,
    validate_rank_item,
)

__all__ = [
    "MessageOut",
    "RankItemData",
    "RankItemOut",
    "ValidationResult",
    "validate_rank_item",
]

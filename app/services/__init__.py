"""Service layer - ranked item operations returning tagged results."""

from app.services.rank_items import Err, Ok, RankItemService, Result

__all__ = [
    "Err",
    "Ok",
    "RankItemService",
    "Result",
]

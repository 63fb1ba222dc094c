"""Block search implementations."""
from .search import SubgraphBlockSearch

__all__ = ["SubgraphBlockSearch"]

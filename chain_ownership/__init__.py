"""Point-in-time ownership of names and catalog items across L1 and L2 subgraphs."""
from .client import OwnershipClient, create_client
from .config import AppConfig, load_config
from .graph.executor import SubgraphQueryError
from .models import Chain, OwnedAssets, OwnershipQuery, OwnershipResult

__all__ = [
    "AppConfig",
    "Chain",
    "OwnedAssets",
    "OwnershipClient",
    "OwnershipQuery",
    "OwnershipResult",
    "SubgraphQueryError",
    "create_client",
    "load_config",
]

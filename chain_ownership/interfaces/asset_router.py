"""Asset router protocol: which chains may hold an asset."""
from typing import Protocol

from ..models import Chain


class AssetRouter(Protocol):
    """Maps an asset identifier to the chains it can be recorded on."""

    def chains_for(self, asset: str) -> tuple[Chain, ...]: ...

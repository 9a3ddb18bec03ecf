"""Remote catalog access and the in-memory asset index."""

from .client import CatalogClient
from .http_client import HttpCatalogClient
from .asset_index import AssetIndex

__all__ = ['CatalogClient', 'HttpCatalogClient', 'AssetIndex']

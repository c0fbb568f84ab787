"""Backend product lookups used to complete bare-id cart lines."""
from .client import CatalogClient
from .hydration import HydratedLine, hydrate_lines, normalize_item

__all__ = ["CatalogClient", "HydratedLine", "hydrate_lines", "normalize_item"]

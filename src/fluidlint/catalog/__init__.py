"""Rule and decision-tree catalog."""

from .loader import BUNDLED_CATALOG_DIR, RuleCatalog, bundled_catalog, load

__all__ = ["BUNDLED_CATALOG_DIR", "RuleCatalog", "bundled_catalog", "load"]

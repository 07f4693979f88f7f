from taskflow.allocation.catalog.base import AccountCatalog, CatalogUnavailableError
from taskflow.allocation.catalog.file import JsonFileAccountCatalog
from taskflow.allocation.catalog.sql import SqlAccountCatalog

__all__ = ["AccountCatalog", "CatalogUnavailableError", "JsonFileAccountCatalog", "SqlAccountCatalog"]

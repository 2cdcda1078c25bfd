from .api import StockServer, get_server, reset_server
from .catalog import Catalog, ItemDefinition, load_catalog
from .exceptions import (
    AlreadyClosedError,
    InvalidAmountError,
    InvalidCatalogError,
    NotFoundError,
    RestockError,
    WaiterLimitExceeded,
)
from .state import InventorySnapshot

__all__ = [
    "StockServer",
    "get_server",
    "reset_server",
    "Catalog",
    "ItemDefinition",
    "load_catalog",
    "InventorySnapshot",
    "RestockError",
    "NotFoundError",
    "InvalidAmountError",
    "AlreadyClosedError",
    "WaiterLimitExceeded",
    "InvalidCatalogError",
]

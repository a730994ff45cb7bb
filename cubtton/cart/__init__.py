"""Cart package: models, storage, manager and presenters."""
from .models import CartLine, LineDisplay
from .storage import CartStorage, MemoryStorage, FileStorage, RedisStorage, StorageKeys
from .service import CartManager, CART_STORAGE_KEY
from .presenter import CartBadge, CartDrawer

__all__ = [
    "CartLine",
    "LineDisplay",
    "CartStorage",
    "MemoryStorage",
    "FileStorage",
    "RedisStorage",
    "StorageKeys",
    "CartManager",
    "CART_STORAGE_KEY",
    "CartBadge",
    "CartDrawer",
]

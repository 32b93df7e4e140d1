"""Cart package: models, pricing, storage backends, and manager."""
from .models import CartLine, Cart
from .pricing import CartTotals, compute_totals
from .service import CartManager
from .storage import CartStorage, MemoryStorage, JsonFileStorage, RedisStorage, build_storage

__all__ = [
    "CartLine",
    "Cart",
    "CartTotals",
    "compute_totals",
    "CartManager",
    "CartStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "RedisStorage",
    "build_storage",
]

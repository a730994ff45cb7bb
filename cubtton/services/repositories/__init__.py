"""
Repository Pattern for Database Operations

- ProductRepository: catalogue reads
- OrderRepository: order creation, status, revenue and stats
"""
from .product_repo import ProductRepository
from .order_repo import OrderRepository

__all__ = [
    "ProductRepository",
    "OrderRepository",
]

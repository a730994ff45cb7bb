# Services Module
from .auth import AuthService, AuthenticationError
from .models import CurrentUser, Order, Product
from .repositories import OrderRepository, ProductRepository

__all__ = ["AuthService", "AuthenticationError", "CurrentUser", "Order", "Product", "OrderRepository", "ProductRepository"]

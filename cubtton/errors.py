"""
Common Message Constants

User-facing alert texts and HTTP error details shared by the cart,
checkout and routers.
"""

# Checkout alerts
MSG_LOGIN_TO_CHECKOUT = "Please login to checkout"
MSG_ORDER_PLACED = "Order placed successfully!"
MSG_ORDER_FAILED_PREFIX = "Failed to place order: "

# Cart errors
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"
ERROR_MISSING_PRODUCT_ID = "product must carry a non-empty id"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"

# Generic errors
ERROR_INTERNAL = "Internal server error"
ERROR_SERVICE_UNAVAILABLE = "Storefront backend unavailable"

# Auth errors
ERROR_NOT_SIGNED_IN = "Not signed in"

"""
Common Error Constants

Centralized error messages shared by the cart, storage and catalog modules.
"""

# Cart contract errors (raised as ValueError)
ERROR_MISSING_PRODUCT_ID = "product must carry a stable, non-empty id"
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"
ERROR_INVALID_DELTA = "delta must be an integer"

# Storage errors
ERROR_REDIS_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_UNKNOWN_STORAGE_BACKEND = "Unknown cart storage backend"

# Logged (never raised) degradations
WARN_CART_SNAPSHOT_CORRUPT = "Stored cart snapshot is not a list of lines"
WARN_CART_LINE_SKIPPED = "Skipping malformed cart line"
WARN_PRODUCT_FETCH_FAILED = "Could not fetch product for cart line"

from .base import Entity, loose_int
from .product import Product

__all__ = ["Entity", "Product", "loose_int"]

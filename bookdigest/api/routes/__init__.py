# bookdigest/api/routes/__init__.py
from bookdigest.api.routes import convert, health

__all__ = ["convert", "health"]

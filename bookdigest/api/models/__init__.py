# bookdigest/api/models/__init__.py
from bookdigest.api.models.schemas import ConvertResponse, HealthResponse

__all__ = ["ConvertResponse", "HealthResponse"]

"""
Domain layer - Contains business entities and domain logic.
This layer is independent of infrastructure and frameworks.
"""
from .entities import Document, infer_file_type, content_type_for

__all__ = [
    "Document",
    "infer_file_type",
    "content_type_for"
]

# helixcompare/core/extract/__init__.py
from .fields import extract_fields

__all__ = ["extract_fields"]

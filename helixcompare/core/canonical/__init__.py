from .canonicalizer import canonicalize, infer_discount, normalize_quantity, normalize_speed

__all__ = ["canonicalize", "infer_discount", "normalize_quantity", "normalize_speed"]

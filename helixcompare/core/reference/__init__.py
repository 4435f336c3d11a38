from .generator import ReferenceRegistry, generate_reference, slugify, stable_url_path

__all__ = ["ReferenceRegistry", "generate_reference", "slugify", "stable_url_path"]

"""CartCraft: file-backed product catalog with page revalidation."""

__version__ = "1.0.0"

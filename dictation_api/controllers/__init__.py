"""FastAPI routers acting as controllers in the MVC architecture."""

from . import auth, dictations, uploads, words

__all__ = ["auth", "dictations", "uploads", "words"]

"""FastAPI routers acting as controllers in the MVC architecture."""

from . import answers

__all__ = ["answers"]

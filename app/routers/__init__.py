# app/routers/__init__.py

from app.routers import health
from app.routers import upload
from app.routers import review

__all__ = ["health", "upload", "review"]

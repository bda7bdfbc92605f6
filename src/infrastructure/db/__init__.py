from . import models  # noqa: F401
from .base import Base
from .session import build_engine, dispose_engine, get_session_factory

__all__ = ["Base", "build_engine", "dispose_engine", "get_session_factory"]

from fitbody.core.config import settings
from fitbody.core.base import Base
from fitbody.core.db import engine, get_db

__all__ = ["settings", "engine", "Base", "get_db"]

"""
Builds the datastore adapter selected by DATABASE_TYPE.
"""
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from .json_adapter import JSONAdapter
from ...core.config import DATABASE_TYPE, JSON_DB_PATH
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def _json_adapter(data_dir: Optional[Union[str, Path]] = None) -> JSONAdapter:
    data_dir = data_dir or JSON_DB_PATH
    return JSONAdapter(data_dir=Path(data_dir) if data_dir else None)


def _memory_adapter(**_ignored) -> MemoryAdapter:
    return MemoryAdapter()


class DatabaseFactory:
    """
    Registry of datastore backends by name.

    ``memory`` keeps everything in process (tests, demos); ``json`` keeps the
    same data in one file per collection.
    """
    
    _builders: Dict[str, Callable[..., DatabaseInterface]] = {
        "json": _json_adapter,
        "memory": _memory_adapter,
    }
    
    @classmethod
    def register(cls, name: str, builder: Callable[..., DatabaseInterface]):
        cls._builders[name.lower()] = builder
    
    @classmethod
    def supported_types(cls):
        return sorted(cls._builders)
    
    @classmethod
    def create(cls, database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """
        Build an adapter without initializing it.
        
        Args:
            database_type: Backend name, defaults to DATABASE_TYPE
            **kwargs: Passed to the backend builder (``data_dir`` for json)
        
        Raises:
            ValueError: For an unknown backend name
        """
        name = (database_type or DATABASE_TYPE).lower()
        builder = cls._builders.get(name)
        if builder is None:
            raise ValueError(
                f"Unsupported database type: {name}. "
                f"Supported types: {', '.join(cls.supported_types())}"
            )
        return builder(**kwargs)
    
    @classmethod
    async def create_and_initialize(cls, database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        db = cls.create(database_type, **kwargs)
        await db.initialize()
        logger.info(f"Database initialized: {type(db).__name__}")
        return db

"""
JSON file-based adapter implementing DatabaseInterface.
Perfect for local demos - stores all data in JSON files for persistence.
Data persists between restarts, no database setup needed.
"""
import json
import asyncio
from pathlib import Path
from typing import Dict, Optional
from threading import Lock

from .memory_adapter import MemoryAdapter, COLLECTIONS
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class JSONAdapter(MemoryAdapter):
    """
    JSON file-based database adapter.

    Keeps the working set in memory (same semantics as MemoryAdapter) and
    writes each touched collection to ``<data_dir>/<collection>.json``
    after every write.
    """
    
    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize JSON adapter.
        
        Args:
            data_dir: Directory to store JSON files (defaults to backend/data/json_db)
        """
        super().__init__()
        if data_dir is None:
            base_dir = Path(__file__).resolve().parent.parent.parent.parent
            data_dir = base_dir / "data" / "json_db"
        
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        
        # Lock for thread-safe file operations
        self._file_lock = Lock()
    
    def _collection_file(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"
    
    async def initialize(self):
        """Initialize database - load data from JSON files."""
        for collection in COLLECTIONS:
            self._data[collection] = self._load_collection(collection)
        self._rebuild_indexes()
        logger.info(
            f"JSON database loaded from {self.data_dir} "
            f"({len(self._data['cards'])} cards, {len(self._data['documents'])} documents)"
        )
    
    async def close(self):
        """Close database - flush every collection to disk."""
        await self._commit(*COLLECTIONS)
    
    def _load_collection(self, collection: str) -> Dict[str, Dict]:
        path = self._collection_file(collection)
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load {path.name}: {e}")
            return {}
    
    async def _commit(self, *collections: str):
        """Save the given collections from memory to JSON files."""
        # Serialize on the loop thread so the snapshot is consistent
        payloads = {
            collection: json.dumps(self._data[collection], indent=2, ensure_ascii=False)
            for collection in collections
        }
        
        def _save():
            with self._file_lock:
                for collection, payload in payloads.items():
                    path = self._collection_file(collection)
                    tmp_path = path.with_suffix(".json.tmp")
                    tmp_path.write_text(payload, encoding="utf-8")
                    tmp_path.replace(path)
        
        # Run in executor to avoid blocking
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _save)
        except IOError as e:
            logger.error(f"Error saving collections {', '.join(collections)}: {e}", exc_info=True)

# core/app.py

import logging
import threading
from pathlib import Path
from typing import Optional

from core.composer import ScriptComposer
from core.config import DB_PATH, LOG_LEVEL, TEMPLATES_PATH
from core.db import ScriptDatabase
from core.script_repository import ScriptRepository
from core.templates import TemplateCatalog

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
log = logging.getLogger(__name__)


class App:
    """
    Composition root. Builds the one ScriptDatabase of the process and
    everything that depends on it, then hands them out by reference.

    App() may be called from several threads at once; only the first call
    builds anything.
    """
    _instance: Optional["App"] = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._initialized = False
                    instance._init_lock = threading.Lock()
                    cls._instance = instance
        return cls._instance

    def __init__(self, db_path: Optional[Path] = None, templates_path: Optional[Path] = None):
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return

            self.database   = ScriptDatabase(Path(db_path or DB_PATH))
            self.repository = ScriptRepository(self.database.script_dao())
            self.templates  = TemplateCatalog.load(Path(templates_path or TEMPLATES_PATH))
            self.composer   = ScriptComposer(self.templates, self.repository)

            log.info("ScriptMine ready: %d templates, database %s",
                     len(self.templates), self.database.path)
            self._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Close the database and forget the instance."""
        with cls._lock:
            instance, cls._instance = cls._instance, None
        if instance is not None and instance._initialized:
            instance.database.close()

"""
Transport binary discovery
"""
import shutil
import threading
from typing import Optional

from ...core.logging import get_logger

logger = get_logger(__name__)


class BinaryLocator:
    """
    Finds an executable on PATH and remembers where it is.

    Once a path is cached it is never re-checked for the lifetime of the
    locator. Until then every locate() call scans PATH again.
    """

    def __init__(self, name: str, path: Optional[str] = None):
        self.name = name
        self._path = path or ""
        self._lock = threading.Lock()

    @property
    def cached(self) -> str:
        """Cached path, or "" if nothing has been located yet"""
        return self._path

    @property
    def path(self) -> str:
        """Cached path, falling back to the bare name for PATH lookup at spawn time"""
        return self._path or self.name

    def locate(self) -> bool:
        """
        Search PATH for the binary.
        
        Returns:
            True if a path is (now) cached, False if the binary wasn't found
        """
        if self._path:
            return True

        with self._lock:
            if self._path:
                return True
            found = shutil.which(self.name)
            if not found:
                logger.debug("%s not found on PATH", self.name)
                return False
            self._path = found
            logger.debug("Located %s at %s", self.name, found)
            return True

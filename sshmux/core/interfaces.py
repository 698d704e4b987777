"""
Core interfaces for dependency injection
"""
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class Client(ABC):
    """Handle to a multiplexed command connection"""

    @property
    @abstractmethod
    def target(self) -> str:
        """user@host token"""
        pass

    @property
    @abstractmethod
    def port(self) -> int:
        """Resolved remote port"""
        pass

    @abstractmethod
    def base_args(self) -> List[str]:
        """Argument prefix shared by every invocation on this connection"""
        pass

    @abstractmethod
    def run(
        self,
        remote_command,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        input: Optional[str] = None,
    ) -> Any:
        """Run a remote command over the shared connection"""
        pass

    @abstractmethod
    def open_sftp(self) -> "SFTPClient":
        """Return a file-transfer client riding the same connection"""
        pass


class SFTPClient(ABC):
    """Handle to a multiplexed file-transfer connection"""

    @property
    @abstractmethod
    def target(self) -> str:
        pass

    @property
    @abstractmethod
    def port(self) -> int:
        pass

    @abstractmethod
    def base_args(self) -> List[str]:
        pass

    @abstractmethod
    def put(self, local_path: str, remote_path: str) -> None:
        """Upload a local file"""
        pass

    @abstractmethod
    def get(self, remote_path: str, local_path: str) -> None:
        """Download a remote file"""
        pass


class Dialer(ABC):
    """Connection dialer interface"""

    @abstractmethod
    def dial(
        self,
        params: Any,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Client:
        """Establish or attach to a connection and return a client"""
        pass


class ConnectionFactory(ABC):
    """Client factory interface"""

    @abstractmethod
    def create(self, params: Dict[str, Any]) -> Client:
        """Create a connected client from a parameter dictionary"""
        pass

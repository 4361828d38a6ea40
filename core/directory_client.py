# =============================================================================
# core/directory_client.py - Abstract directory client
# =============================================================================

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
import logging

from core.models import Member


class DirectoryClient(ABC):
    """Abstract base class for directory backends"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()

    @abstractmethod
    def connect(self) -> None:
        """Establish the session; raise PrerequisiteMissingError on failure"""
        pass

    def disconnect(self) -> None:
        """Release the session"""
        pass

    @abstractmethod
    def find_groups(self, display_name: str) -> List[Dict[str, str]]:
        """Return every group whose display name matches exactly, as {'id', 'displayName'}"""
        pass

    @abstractmethod
    def list_members(self, group_id: str, transitive: bool = False) -> Iterable[Member]:
        """Yield direct or transitive members of a group across all pages"""
        pass

    def find_service_principal(self, app_object_id: str) -> Optional[Dict[str, str]]:
        """Look up the service principal backing an application object"""
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support application lookups"
        )

    def list_app_role_assignments(self, service_principal_id: str) -> Iterable[Dict[str, str]]:
        """Yield app role assignments granted on a service principal"""
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support application lookups"
        )

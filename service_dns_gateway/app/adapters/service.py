"""
DNS service facade interface.

This module defines the contract the gateway uses to install its storage and
manage domains and records. Implementations are bound to one pooled
connection per request.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict


class DNSService(ABC):
    """Abstract base class for DNS service facades."""

    @abstractmethod
    async def install(self) -> None:
        """Create the storage structure."""
        pass

    @abstractmethod
    async def uninstall(self) -> None:
        """Drop the storage structure."""
        pass

    @abstractmethod
    async def create_domain(self, order: Dict[str, Any]) -> Any:
        """Create a domain and return its identifier."""
        pass

    @abstractmethod
    async def delete_domain(self, order: Dict[str, Any]) -> None:
        """Delete a domain."""
        pass

    @abstractmethod
    async def add_record(self, order: Dict[str, Any]) -> Any:
        """Add a DNS record and return its identifier."""
        pass

    @abstractmethod
    async def update_record(self, order: Dict[str, Any]) -> None:
        """Update an existing DNS record."""
        pass

    @abstractmethod
    async def del_record(self, order: Dict[str, Any]) -> None:
        """Delete a DNS record."""
        pass


ServiceFactory = Callable[[Any], DNSService]

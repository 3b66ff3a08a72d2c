"""
DNS service facade adapters.
"""

from .service import DNSService
from .postgres_service import PostgresDNSService

__all__ = ["DNSService", "PostgresDNSService"]

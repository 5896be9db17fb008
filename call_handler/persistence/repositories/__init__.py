"""Repository implementations."""

from call_handler.persistence.repositories.base import BaseRepository
from call_handler.persistence.repositories.call_log_repository import CallLogRepository, PersistenceError
from call_handler.persistence.repositories.partner_repository import PartnerRepository

__all__ = [
    "BaseRepository",
    "CallLogRepository",
    "PartnerRepository",
    "PersistenceError",
]

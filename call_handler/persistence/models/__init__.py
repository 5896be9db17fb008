"""Database models."""

from call_handler.persistence.models.call_log import CallLog
from call_handler.persistence.models.partner import Partner

__all__ = [
    "CallLog",
    "Partner",
]

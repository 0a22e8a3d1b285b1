"""SQLAlchemy models for DealScout.

All models are imported here so metadata.create_all can discover them.
"""

from dealscout.models.base import Base
from dealscout.models.deal_record import DealRecord

__all__ = [
    "Base",
    "DealRecord",
]

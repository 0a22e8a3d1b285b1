"""Business logic services: deal computation and deal persistence."""

from dealscout.services.deal_service import DealEngine, ScanResult, compute_discount_pct, scan_deals
from dealscout.services.deal_store import DealStore, SaveResult

__all__ = [
    "DealEngine",
    "ScanResult",
    "compute_discount_pct",
    "scan_deals",
    "DealStore",
    "SaveResult",
]

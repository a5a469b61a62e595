"""
Warranty Registry: Digital Warranty Lifecycle.

Sellers issue warranties identified by short shareable codes; buyers claim
them, add self-declared ones, and release them to new owners. Anyone can
verify a warranty by code or serial number.

Key Features:
- Low-ambiguity CB-XXXX-XXXX codes with collision retry
- Calendar-month expiry with derived coverage status
- Single-owner claims via atomic conditional updates
- Redacted public verification
"""

from services.warranty.codes import generate_warranty_code, normalize_code
from services.warranty.expiry import CoverageStatus, compute_expiry, coverage_status
from services.warranty.lifecycle import ReleaseResult, WarrantyLifecycle
from services.warranty.models import Principal, WarrantyRecord

__all__ = [
    "generate_warranty_code",
    "normalize_code",
    "CoverageStatus",
    "compute_expiry",
    "coverage_status",
    "ReleaseResult",
    "WarrantyLifecycle",
    "Principal",
    "WarrantyRecord",
]

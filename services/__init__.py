"""
Warranty Registry Services
==========================

Services:
- warranty: warranty issue, claim, transfer, verification and seller profiles
"""

__all__ = [
    "warranty",
]

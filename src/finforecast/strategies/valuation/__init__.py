"""
Valuation strategies for asset accounts.
"""

from .growth import ValuationAppreciating, ValuationInvestment, ValuationStatic

__all__ = ["ValuationInvestment", "ValuationAppreciating", "ValuationStatic"]

"""
Utility functions for BizLedger.

This package contains:
- datetime_utils: UTC timestamps and ISO date parsing
- decimal_utils: Money rounding and column precision helpers
"""

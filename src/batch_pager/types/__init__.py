"""
Core data types: request descriptors, outcomes and pages.
"""

from batch_pager.types.outcome import Outcome, Page, PageResult, Success
from batch_pager.types.request import RequestDescriptor

__all__ = [
    "Outcome",
    "Page",
    "PageResult",
    "RequestDescriptor",
    "Success",
]

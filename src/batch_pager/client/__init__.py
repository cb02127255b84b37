"""
Client module - main entry point for batch-pager.
"""

from batch_pager.client.builder import PagerClientBuilder
from batch_pager.client.core import PagerClient
from batch_pager.client.endpoints import Endpoints, subject_params

__all__ = [
    "Endpoints",
    "PagerClient",
    "PagerClientBuilder",
    "subject_params",
]

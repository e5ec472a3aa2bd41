"""
Distribution of contact records across the agent roster.
"""

from .engine import (
    distribute,
    partition_records,
    compute_chunk_size,
    AgentDistribution,
    DistributionSummary,
    DistributionStore,
)

__all__ = [
    "distribute",
    "partition_records",
    "compute_chunk_size",
    "AgentDistribution",
    "DistributionSummary",
    "DistributionStore",
]

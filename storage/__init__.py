"""
Storage Module
Usage counters and the daily news cache
"""
from .usage import (
    UsageCounterStore,
    InMemoryUsageStore,
    FileUsageStore,
    UsageBudgetTracker,
)
from .cache import DailyCacheStore

__all__ = [
    # Usage
    "UsageCounterStore",
    "InMemoryUsageStore",
    "FileUsageStore",
    "UsageBudgetTracker",
    # Cache
    "DailyCacheStore",
]

"""
Rate Lookup Gateway: the interface between the pricing core and the
rate store, plus an in-memory implementation and a caching wrapper.
"""

from life_pricing.gateway.base import RateGateway
from life_pricing.gateway.caching import CacheStats, CachingRateGateway
from life_pricing.gateway.tables import TableRateGateway, term_control_code

__all__ = [
    "RateGateway",
    "CacheStats",
    "CachingRateGateway",
    "TableRateGateway",
    "term_control_code",
]

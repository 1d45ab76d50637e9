"""
PlateWatch plate helpers

Normalization and matching for model-read plates and operator watchlists.
"""

from platewatch.plates.normalize import (
    normalize_plate,
    parse_watchlist,
    parse_plate_response,
    parse_violation_response,
    has_violation,
    match_watchlist,
)

__all__ = [
    'normalize_plate',
    'parse_watchlist',
    'parse_plate_response',
    'parse_violation_response',
    'has_violation',
    'match_watchlist',
]

"""
License Plate Normalization

Normalizes plate strings and model responses for consistent matching.
Matching is case- and surrounding-whitespace-insensitive; inner
characters (hyphens, spaces) are kept as the operator typed them.
"""

from typing import List, Optional


VIOLATION_NONE = "NONE"


def normalize_plate(plate_text: Optional[str]) -> str:
    """
    Normalize license plate text for comparison.

    Args:
        plate_text: Raw plate text from the model or the operator

    Returns:
        Trimmed, upper-cased plate string ("" for empty input)
    """
    if not plate_text:
        return ""
    return plate_text.strip().upper()


def parse_watchlist(watchlist_text: Optional[str]) -> List[str]:
    """
    Parse operator watchlist text, one plate per line.

    Blank lines are dropped; order is kept.
    """
    if not watchlist_text:
        return []

    plates = []
    for line in watchlist_text.splitlines():
        plate = normalize_plate(line)
        if plate:
            plates.append(plate)
    return plates


def parse_plate_response(response_text) -> List[str]:
    """
    Parse the model's comma-separated plate list.

    Args:
        response_text: Raw response text (may be None or not a string)

    Returns:
        Trimmed, non-empty plate tokens in response order
    """
    if not response_text or not isinstance(response_text, str):
        return []
    return [token.strip() for token in response_text.strip().split(",") if token.strip()]


def parse_violation_response(response_text) -> str:
    """Trimmed violation text, or "NONE" when the model returned nothing"""
    if not response_text or not isinstance(response_text, str):
        return VIOLATION_NONE
    return response_text.strip() or VIOLATION_NONE


def has_violation(violation_text: Optional[str]) -> bool:
    """
    Check whether violation text describes at least one violation.

    "NONE" (any case, any surrounding whitespace) and blank text mean none.
    """
    if not violation_text:
        return False
    text = violation_text.strip().upper()
    return bool(text) and text != VIOLATION_NONE


def match_watchlist(detected_plates: List[str], watchlist: List[str]) -> List[str]:
    """
    Find detected plates that appear on the watchlist.

    Args:
        detected_plates: Plates as returned by the model
        watchlist: Normalized watchlist plates

    Returns:
        Normalized matched plates in detection order, each listed once
    """
    if not detected_plates or not watchlist:
        return []

    wanted = set(watchlist)
    matches = []
    for plate in detected_plates:
        normalized = normalize_plate(plate)
        if normalized in wanted and normalized not in matches:
            matches.append(normalized)
    return matches

"""Search text utilities."""

LIKE_ESCAPE = "\\"


def contains_pattern(query: str) -> str:
    """
    Build a LIKE pattern matching ``query`` anywhere in a column.

    ``%``, ``_`` and the escape character itself are escaped, so user text
    only ever matches literally. Pass ``escape=LIKE_ESCAPE`` to ``ilike``.

    Args:
        query: Raw search text

    Returns:
        Pattern of the form ``%<escaped text>%``

    Examples:
        >>> contains_pattern(" 50% ")
        '%50\\\\%%'
    """
    escaped = (
        query.strip()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"

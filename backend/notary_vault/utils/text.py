LIKE_ESCAPE = "\\"


def contains_pattern(value: str) -> str:
    """LIKE pattern matching ``value`` as a literal substring.

    Use with ``escape=LIKE_ESCAPE`` so ``%`` and ``_`` in user input are not
    wildcards.
    """
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"

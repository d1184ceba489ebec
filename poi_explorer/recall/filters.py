from typing import Any, Mapping


def encode_filters(filters: Mapping[str, Any] = None) -> list[dict]:
    """
    Turn {field: value} into exact-match term clauses.
    Entries whose value is None or blank after str().strip() are dropped;
    the original value goes into the term.
    """
    if not filters:
        return []
    return [
        {"term": {field: value}}
        for field, value in filters.items()
        if value is not None and str(value).strip() != ""
    ]

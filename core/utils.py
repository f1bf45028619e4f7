# core/utils.py

def sanitize(data: dict) -> dict:
    """
    Sanitize dictionary data before it is written to Supabase:
    - Empty strings → None
    - Preserve booleans, numbers and None values
    - Strip string whitespace

    Numeric-looking strings stay strings: unit names ("101"),
    assignee names and titles must round-trip unchanged.
    """
    clean = {}

    for k, v in data.items():
        if v is None or isinstance(v, bool):
            clean[k] = v
            continue

        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped if stripped else None
            continue

        # Enums, dates and nested JSON are serialized by the caller
        clean[k] = v

    return clean


def drop_unset(data: dict) -> dict:
    """Remove None values so partial updates never blank out columns."""
    return {k: v for k, v in data.items() if v is not None}


def short_id(record_id: str, length: int = 8) -> str:
    """Short, human-readable prefix of a UUID for audit details."""
    return str(record_id)[:length]


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

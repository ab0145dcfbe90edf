import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9\-_]")
_HYPHEN_RUNS = re.compile(r"-+")


def to_url_friendly(value):
    """
    Turn free text into a lowercase, hyphenated slug.

    Only a-z, 0-9, '-' and '_' survive. Empty or whitespace-only input
    gives an empty string.
    """
    if value is None or not value.strip():
        return ""

    result = value.lower().strip()
    result = _WHITESPACE.sub("-", result)
    result = _DISALLOWED.sub("", result)
    result = _HYPHEN_RUNS.sub("-", result)
    return result.strip("-")


def derive_park_code(name, state_code):
    """
    Build the natural key for a park, e.g. ("Grand Canyon", "AZ") -> "grand-canyon-az".

    The key is not checked for uniqueness here; storage enforces that.
    """
    return f"{to_url_friendly(name)}-{to_url_friendly(state_code)}"

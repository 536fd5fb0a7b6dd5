"""Small string helpers shared by services."""


def capitalize(value: str | None) -> str:
    """Uppercase the first character and lowercase the rest.

    Returns an empty string for None or blank input.
    """
    if not value:
        return ""
    value = value.strip()
    return value[:1].upper() + value[1:].lower()

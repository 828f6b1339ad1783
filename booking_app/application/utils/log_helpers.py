def mask_token(token: str | None) -> str | None:
    """Keep only enough of a token to correlate log lines."""
    if not token:
        return None
    if len(token) <= 4:
        return "***"
    return f"{token[:3]}***"

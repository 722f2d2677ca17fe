ELLIPSIS = "…"

SHORT_SUMMARY_LIMIT = 300
DETAILED_SUMMARY_LIMIT = 1000


def truncate(text: str, limit: int) -> str:
    """
    Fits text into `limit` characters, preferring a word boundary.

    The cut keeps `limit - 3` characters. If the last space in that window
    falls within its final 20%, the text ends at the space; otherwise it is
    hard-cut. Either way an ellipsis is appended. Text that already fits is
    returned unchanged, so the function is idempotent.
    """
    if not text:
        return ""
    if len(text) <= limit:
        return text

    window = max(limit - 3, 0)
    trimmed = text[:window]
    last_space = trimmed.rfind(" ")
    if last_space > window * 0.8:
        return trimmed[:last_space] + ELLIPSIS
    return trimmed + ELLIPSIS

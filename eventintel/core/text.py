"""Small text helpers shared by notification rendering."""

from __future__ import annotations


def truncate(
    text: str | None,
    limit: int,
    suffix: str = "...",
    *,
    keep: int | None = None,
) -> str:
    """Shorten ``text`` when it is longer than ``limit`` characters.

    By default the suffix counts against the limit, so the result is never
    longer than ``limit``. Passing ``keep`` instead keeps exactly that many
    leading characters before the suffix (the result may then exceed
    ``limit`` by the suffix length).

    Args:
        text: Source text (None is treated as empty)
        limit: Length above which the text is cut
        suffix: Marker appended when the text was cut
        keep: Leading characters kept when cutting (defaults to
            ``limit - len(suffix)``)

    Returns:
        The original text, or its truncated form
    """
    text = "" if text is None else str(text)
    if len(text) <= limit:
        return text
    if keep is None:
        keep = max(limit - len(suffix), 0)
    return text[:keep] + suffix

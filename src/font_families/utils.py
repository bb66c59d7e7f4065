"""
Font family string helpers.

format_font_family() canonicalizes a CSS font-family value before it is
stored; sanitize_title() turns a user supplied slug into the machine-safe
form used as the stored post_name.
"""
import re
import unicodedata
from urllib.parse import quote


def format_font_family(font_family: str) -> str:
    """Format a CSS font-family value.

    Each comma separated family is trimmed; families containing a space
    and no quote characters are wrapped in double quotes. Families are
    rejoined with ", ".

    Args:
        font_family: Raw font-family value, e.g. "Open Sans, sans-serif"

    Returns:
        The formatted value, e.g. '"Open Sans", sans-serif'. Empty input
        is returned unchanged.

    Example:
        >>> format_font_family("Rock 3D , Arial, sans-serif")
        '"Rock 3D", Arial, sans-serif'
        >>> format_font_family("'Noto Sans'")
        "'Noto Sans'"
    """
    if not font_family:
        return font_family

    wrapped = []
    for family in font_family.split(","):
        trimmed = family.strip()
        if trimmed and " " in trimmed and "'" not in trimmed and '"' not in trimmed:
            trimmed = f'"{trimmed}"'
        wrapped.append(trimmed)

    if len(wrapped) == 1:
        return wrapped[0]
    return ", ".join(wrapped)


_TAG_PATTERN = re.compile(r"<[^>]*>")
_ENTITY_PATTERN = re.compile(r"&[a-zA-Z0-9#]+;")
_STRAY_PERCENT_PATTERN = re.compile(r"%(?![a-fA-F0-9]{2})")
_SEPARATOR_PATTERN = re.compile(r"[\s./\\]+")
_DISALLOWED_PATTERN = re.compile(r"[^a-z0-9_%\-]")
_DASHES_PATTERN = re.compile(r"-+")


def _transliterate(char: str) -> str:
    """Reduce one character to ASCII, percent-encoding it when accents can't."""
    if char.isascii():
        return char
    decomposed = unicodedata.normalize("NFKD", char)
    ascii_form = "".join(c for c in decomposed if c.isascii())
    if ascii_form:
        return ascii_form
    # Combining marks left over from a decomposed Latin letter
    if unicodedata.combining(char):
        return ""
    return quote(char, safe="").lower()


def sanitize_title(title: str) -> str:
    """Convert a title or slug into a lowercase, dash separated slug.

    Steps: strip HTML tags and entities, strip accents, percent-encode the
    UTF-8 octets of characters with no ASCII form, lowercase, turn
    whitespace, dots and slashes into dashes, drop anything outside
    [a-z0-9_%-], collapse repeated dashes and trim dashes at both ends.

    Example:
        >>> sanitize_title("Crème  Brûlée.Sans")
        'creme-brulee-sans'
        >>> sanitize_title("明朝")
        '%e6%98%8e%e6%9c%9d'
    """
    if not title:
        return ""

    title = _TAG_PATTERN.sub("", str(title))
    title = _ENTITY_PATTERN.sub("", title)
    title = _STRAY_PERCENT_PATTERN.sub("", title)
    title = "".join(_transliterate(char) for char in title)
    title = title.lower()
    title = _SEPARATOR_PATTERN.sub("-", title)
    title = _DISALLOWED_PATTERN.sub("", title)
    title = _DASHES_PATTERN.sub("-", title)
    return title.strip("-")

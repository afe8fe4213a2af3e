"""URL slug derivation for article titles."""

import re

from slugify import slugify

# Characters dropped outright rather than turned into separators,
# so "Can't connect" becomes "cant-connect" and not "can-t-connect".
_REMOVED_CHARS = re.compile(r"[*+~.()'\"!:@]")


def generate_slug(title: str) -> str:
    """Derive a lowercase, hyphenated, punctuation-free slug from a title.

    Returns an empty string when the title has no alphanumeric content;
    callers must treat that as invalid input.
    """
    return slugify(_REMOVED_CHARS.sub("", title), lowercase=True)

"""URL slugs for posts: normalised title plus a random numeric suffix."""

import random
import re
from typing import Optional

SUFFIX_MAX = 999

# ASCII word characters, but any Unicode whitespace
_NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE = re.compile(r"\s+")


def slugify_title(title: str) -> str:
    """Lower-case, drop punctuation, hyphenate whitespace runs."""
    cleaned = _NON_WORD.sub("", title.lower())
    return _WHITESPACE.sub("-", cleaned).strip()


def generate_slug(title: str, rng: Optional[random.Random] = None) -> str:
    """
    Build a post slug such as ``my-first-post-417``.

    The suffix is drawn uniformly from 0..999. Uniqueness is not checked
    here; callers rely on the unique index on ``posts.slug`` and retry.
    """
    rng = rng or random
    return f"{slugify_title(title)}-{rng.randint(0, SUFFIX_MAX)}"

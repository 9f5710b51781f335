# ABOUTME: Stable identifiers for articles that arrive without a provider id.
# ABOUTME: Hashes source tag and URL so repeated fetches yield the same id.

import hashlib


def generate_article_id(source: str, key: str) -> str:
    """Generate a short stable id from a source tag and a per-item key (guid or URL)."""
    return hashlib.sha256(f"{source}:{key}".encode()).hexdigest()[:16]

"""Public URL resolution for stored file keys."""
from typing import Optional

from civic_events.config import settings


def resolve_asset_url(key: Optional[str]) -> Optional[str]:
    """Return the CDN URL for a storage key, or None when nothing is stored."""
    if not key:
        return None
    if key.startswith(("http://", "https://")):
        return key
    return f"{settings.ASSET_BASE_URL.rstrip('/')}/{key.lstrip('/')}"

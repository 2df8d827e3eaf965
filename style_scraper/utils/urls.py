"""
URL resolution for asset references found in scraped markup.
"""
from urllib.parse import urljoin, urlparse


def resolve_url(base_url: str, candidate: str, allow_data: bool = False) -> str:
    """
    Resolve a possibly-relative asset reference against the page URL.

    Args:
        base_url: Absolute URL of the page the reference came from
        candidate: Raw src/href/url() value
        allow_data: Keep ``data:`` URIs (image metadata) instead of
            dropping them (logo and background contexts)

    Returns:
        Absolute http(s) URL, the data URI itself, or "" when there
        is no usable URL. Never raises.
    """
    if not candidate:
        return ""
    try:
        candidate = candidate.strip()
        if not candidate:
            return ""

        lowered = candidate.lower()
        if lowered.startswith("data:"):
            return candidate if allow_data else ""

        if lowered.startswith(("http://", "https://")):
            parsed = urlparse(candidate)
            return candidate if parsed.netloc else ""

        base = urlparse(base_url)
        if base.scheme not in ("http", "https") or not base.netloc:
            return ""

        # Protocol-relative reference
        if candidate.startswith("//"):
            resolved = f"{base.scheme}:{candidate}"
        else:
            resolved = urljoin(base_url, candidate)

        parsed = urlparse(resolved)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return ""
        return resolved
    except (ValueError, TypeError, AttributeError):
        return ""


def hostname_of(url: str) -> str:
    """Return the lowercase hostname without a leading ``www.``, or ""."""
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def is_http_url(url: str) -> bool:
    """Check that a URL is absolute and uses http or https."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)

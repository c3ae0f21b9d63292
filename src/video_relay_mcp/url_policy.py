"""Video URL policy: which links the relay is willing to hand to Gemini.

Gemini fetches the file itself from the URL, so only direct links to a video
file work. Pages on video-hosting platforms are rejected with guidance, and
everything else must be an http(s) URL whose path ends in a known extension.
No network access happens here.
"""

from __future__ import annotations

from urllib.parse import urlparse

from .errors import ErrorCategory, RelayError

VIDEO_EXTENSIONS: tuple[str, ...] = (".mp4", ".mov", ".avi", ".webm")

HOSTED_PLATFORM_MESSAGE = (
    "YouTube URLs are not supported. Please provide a direct video file URL "
    "(e.g., https://example.com/video.mp4). You can upload your video to a file "
    "hosting service or use a direct MP4 link."
)
UNSUPPORTED_FORMAT_MESSAGE = (
    "Please provide a direct video file URL ending with .mp4, .mov, .avi, or .webm "
    "(e.g., https://example.com/video.mp4)"
)


def _host(url: str) -> str:
    """Return the lowercased hostname of *url* minus any trailing dot, or "" if none."""
    try:
        return (urlparse(url.strip()).hostname or "").lower().rstrip(".")
    except ValueError:
        return ""


def _is_youtube_host(host: str) -> bool:
    """Check if host is a youtube.com domain (including subdomains like m.youtube.com)."""
    return host == "youtube.com" or host.endswith(".youtube.com")


def _is_youtu_be_host(host: str) -> bool:
    """Check if host is the youtu.be short-link domain."""
    return host == "youtu.be" or host == "www.youtu.be"


def is_hosted_platform_url(url: str) -> bool:
    """True when *url* points at a video-hosting page rather than a file."""
    host = _host(url)
    return bool(host) and (_is_youtube_host(host) or _is_youtu_be_host(host))


def is_direct_video_url(url: str) -> bool:
    """True for http(s) URLs whose path ends in a recognized video extension.

    The check is case-insensitive and ignores the query string and fragment,
    so signed CDN links (``video.MP4?token=...``) pass.
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        return False
    return parsed.path.lower().endswith(VIDEO_EXTENSIONS)


def validate_video_url(url: str) -> str:
    """Apply the source and format checks, in that order.

    Returns:
        The stripped URL.

    Raises:
        RelayError: ``UNSUPPORTED_SOURCE`` for hosting-platform pages,
            ``UNSUPPORTED_FORMAT`` for anything that isn't a direct file link.
    """
    url = url.strip()
    if is_hosted_platform_url(url):
        raise RelayError(ErrorCategory.UNSUPPORTED_SOURCE, HOSTED_PLATFORM_MESSAGE, 400)
    if not is_direct_video_url(url):
        raise RelayError(ErrorCategory.UNSUPPORTED_FORMAT, UNSUPPORTED_FORMAT_MESSAGE, 400)
    return url

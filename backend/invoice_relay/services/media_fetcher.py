"""
Media download service.

Downloads an inbound attachment and stores it on local disk under the media
directory as <message_sid><ext>. The directory is shared by all concurrent
requests; filenames are keyed by the platform message SID so requests never
write to the same file. A SID that is empty or has to be rewritten to be a
safe filename gets a random stem instead, since it no longer identifies a
single message.
"""

import logging
import os
import re
import uuid
from pathlib import Path
from urllib.parse import urlparse

import httpx

from invoice_relay.errors import MediaDownloadError

logger = logging.getLogger(__name__)

# Extension used when the media URL itself carries none
MEDIA_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}

_CHUNK_SIZE = 64 * 1024


def resolve_extension(url: str, media_type: str) -> str:
    """
    Return the file extension for a downloaded attachment.

    The extension of the URL path wins (query strings are ignored). Otherwise
    the media type is looked up in MEDIA_TYPE_EXTENSIONS; unknown types
    yield ''.
    """
    ext = os.path.splitext(urlparse(url).path)[1]
    if ext:
        return ext
    return MEDIA_TYPE_EXTENSIONS.get(media_type, "")


def _file_stem(message_id: str) -> str:
    # Replace anything that is not a word char, dash or dot
    sanitized = re.sub(r"[^\w\-.]", "_", message_id).lstrip(".")
    if not sanitized or sanitized != message_id:
        return uuid.uuid4().hex
    return sanitized


class MediaFetcher:
    """Downloads attachments into a local media directory."""

    def __init__(self, http_client: httpx.Client, media_dir: str):
        self._http = http_client
        self.media_dir = Path(media_dir)

    def path_for(self, message_id: str, ext: str) -> Path:
        return self.media_dir / f"{_file_stem(message_id)}{ext}"

    def fetch(self, url: str, message_id: str, media_type: str) -> Path:
        """
        Download ``url`` and stream it to <media_dir>/<message_id><ext>.

        The GET is unauthenticated and follows redirects (Twilio media URLs
        redirect to a CDN).

        Returns:
            Path of the stored file.

        Raises:
            MediaDownloadError: on any network, HTTP status, directory or
                file failure. A partially written file is removed.
        """
        if not url:
            raise MediaDownloadError("No media URL provided")

        path = self.path_for(message_id, resolve_extension(url, media_type))

        try:
            os.makedirs(self.media_dir, exist_ok=True)
        except OSError as e:
            raise MediaDownloadError(f"Failed to create media directory {self.media_dir}: {e}")

        try:
            with self._http.stream("GET", url, follow_redirects=True) as response:
                response.raise_for_status()
                with open(path, "wb") as f:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        f.write(chunk)
        except (httpx.HTTPError, OSError) as e:
            self.discard(path)
            raise MediaDownloadError(f"Failed to download media from {url}: {e}")

        logger.info(f"Stored media for message {message_id!r} at {path}")
        return path

    def discard(self, path: Path) -> None:
        """Delete a stored media file. Missing files are ignored."""
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove media file {path}: {e}")

"""
Short-lived cache of generated PDF URLs.

Backs the program-success redirect page: the trainer's browser lands there
right after the webhook returns, so entries only need to live a few
minutes. This is process memory, not a store; a restart empties it.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PdfUrlCache:
    """
    contact id -> PDF URL, each entry expiring ttl_seconds after insertion.

    Expired entries are invisible to get() and are purged on every write.
    The clock is injectable so tests don't have to sleep.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def set(self, contact_id: str, pdf_url: str) -> None:
        self._purge_expired()
        self._entries[contact_id] = (pdf_url, self._clock() + self._ttl)
        logger.debug(
            "Cached PDF URL",
            extra={"contact_id": contact_id, "ttl_seconds": self._ttl},
        )

    def get(self, contact_id: str) -> Optional[str]:
        entry = self._entries.get(contact_id)
        if entry is None:
            return None
        pdf_url, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[contact_id]
            return None
        return pdf_url

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

"""
Club lookup by CRM location id.

The club list is loaded once at startup and never changes afterwards.
Resolution never fails: an unknown or disabled location gets a default
club that uses the process-wide fallback credentials.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from .models import ClubConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClubEntry:
    """A row from the clubs config file."""
    club_name: str
    club_number: str
    location_id: str
    api_key: str = ""
    enabled: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClubEntry":
        return cls(
            club_name=str(data.get("clubName", "")),
            club_number=str(data.get("clubNumber", "")),
            location_id=str(data.get("ghlLocationId", "")),
            api_key=str(data.get("ghlApiKey", "")),
            enabled=bool(data.get("enabled", False)),
        )


class ClubDirectory:
    """
    Read-only directory of clubs.

    Created once in the application lifespan and shared by all requests.
    """

    def __init__(
        self,
        entries: Iterable[ClubEntry],
        brand_name: str,
        from_email: str,
        fallback_api_key: str = "",
    ) -> None:
        self._entries = tuple(entries)
        self._brand_name = brand_name
        self._from_email = from_email
        self._fallback_api_key = fallback_api_key

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        brand_name: str,
        from_email: str,
        fallback_api_key: str = "",
    ) -> "ClubDirectory":
        """
        Load the clubs config file.

        A missing or malformed file is not fatal: the directory starts
        empty and every location resolves to the default club.
        """
        entries: list[ClubEntry] = []
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            entries = [ClubEntry.from_dict(item) for item in raw.get("clubs", [])]
        except (OSError, ValueError, AttributeError) as e:
            logger.error(
                "Could not load clubs config, using fallback credentials",
                extra={"path": str(path), "error": str(e)},
            )

        directory = cls(entries, brand_name, from_email, fallback_api_key)
        logger.info(
            "Loaded clubs config",
            extra={
                "clubs": len(directory._entries),
                "enabled": len(directory.enabled_clubs),
            },
        )
        return directory

    @property
    def enabled_clubs(self) -> list[ClubEntry]:
        return [entry for entry in self._entries if entry.enabled]

    def resolve(self, location_id: str) -> ClubConfig:
        """Return the enabled club for a location, or the default club."""
        for entry in self._entries:
            if entry.location_id == location_id and entry.enabled:
                return ClubConfig(
                    club_name=entry.club_name,
                    club_number=entry.club_number,
                    location_id=entry.location_id,
                    api_key=entry.api_key,
                    enabled=True,
                    from_email=self._from_email,
                    from_name=self._sender_name(entry.club_name),
                    is_default=False,
                )

        logger.warning(
            "No enabled club for location, using default config",
            extra={"location_id": location_id},
        )
        return ClubConfig(
            club_name=self._brand_name,
            location_id=location_id,
            api_key=self._fallback_api_key,
            enabled=True,
            from_email=self._from_email,
            from_name=self._brand_name,
            is_default=True,
        )

    def _sender_name(self, club_name: str) -> str:
        if self._brand_name in club_name:
            return club_name
        return f"{self._brand_name} - {club_name}"

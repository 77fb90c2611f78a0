"""Data models for watch-list items, catalog candidates and sync outcomes."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


class Source(Enum):
    """Catalog an item's external id comes from."""
    IMDB = "imdb"
    TMDB = "tmdb"


class Target(Enum):
    """Media manager a list is synced into."""
    RADARR = "radarr"
    SONARR = "sonarr"

    @classmethod
    def parse(cls, value: str) -> 'Target':
        """Accept 'radarr'/'movie'/'movies' and 'sonarr'/'series'/'tv'."""
        aliases = {
            'radarr': cls.RADARR, 'movie': cls.RADARR, 'movies': cls.RADARR,
            'sonarr': cls.SONARR, 'series': cls.SONARR, 'tv': cls.SONARR,
        }
        try:
            return aliases[str(value).strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown target '{value}' (use radarr or sonarr)") from None


class Reason(Enum):
    """Why an outcome is not a fresh add."""
    NOT_FOUND = "not_found"
    EXISTS = "exists"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_imdb_id(value) -> str:
    """Prepend the 'tt' prefix to a bare IMDb number."""
    text = str(value).strip()
    if not text:
        return text
    return text if text.lower().startswith('tt') else f"tt{text}"


@dataclass(frozen=True)
class ListItem:
    """One entry of a named list."""
    source: Source
    external_id: str
    added_at: str = field(default_factory=utc_now_iso)
    added_by: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.source, Source):
            object.__setattr__(self, 'source', Source(str(self.source).strip().lower()))
        external_id = str(self.external_id).strip() if self.external_id is not None else ''
        if not external_id:
            raise ValueError("List items need a non-empty external id")
        object.__setattr__(self, 'external_id', external_id)

    @property
    def spec(self) -> str:
        return f"{self.source.value}:{self.external_id}"

    def to_dict(self) -> dict:
        data = {'source': self.source.value, 'id': self.external_id, 'added_at': self.added_at}
        if self.added_by:
            data['added_by'] = self.added_by
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ListItem':
        # 'date'/'addedBy' are the keys written by older data files
        return cls(
            source=data.get('source') or 'imdb',
            external_id=data.get('id', data.get('external_id')),
            added_at=data.get('added_at') or data.get('date') or utc_now_iso(),
            added_by=data.get('added_by', data.get('addedBy')),
        )


def parse_id_spec(spec: str) -> ListItem:
    """
    Parse 'imdb:tt0111161', 'tmdb:278' or a bare id (assumed IMDb).

    Raises:
        ValueError: Unknown source prefix or empty id
    """
    text = str(spec).strip()
    if ':' in text:
        source, external_id = text.split(':', 1)
    else:
        source, external_id = 'imdb', text
    try:
        parsed_source = Source(source.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown id source '{source}' (use imdb: or tmdb:)") from None
    return ListItem(source=parsed_source, external_id=external_id)


@dataclass(frozen=True)
class ExternalIds:
    tmdb_id: Optional[int] = None
    tvdb_id: Optional[int] = None
    imdb_id: Optional[str] = None

    def as_dict(self) -> dict:
        data = {}
        if self.tmdb_id:
            data['tmdbId'] = self.tmdb_id
        if self.tvdb_id:
            data['tvdbId'] = self.tvdb_id
        if self.imdb_id:
            data['imdbId'] = self.imdb_id
        return data


@dataclass(frozen=True)
class CandidateRecord:
    """Normalized catalog record; also used for a service's stored record."""
    title: Optional[str]
    external_ids: ExternalIds = field(default_factory=ExternalIds)
    year: Optional[int] = None
    overview: Optional[str] = None
    image_urls: List[str] = field(default_factory=list)
    service_id: Optional[int] = None
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def image_url(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None

    @property
    def display_title(self) -> str:
        title = self.title or 'Unknown'
        return f"{title} ({self.year})" if self.year else title

    def to_dict(self) -> dict:
        data = {'title': self.title, 'year': self.year, **self.external_ids.as_dict()}
        if self.service_id:
            data['id'] = self.service_id
        data['overview'] = self.overview
        data['imageUrl'] = self.image_url
        data['images'] = list(self.image_urls)
        return data


@dataclass(frozen=True)
class AddDefaults:
    """Storage root and quality profile used for one add request."""
    root_folder_path: str
    quality_profile_id: int

    def __post_init__(self):
        if not self.root_folder_path:
            raise ValueError("AddDefaults needs a root folder path")
        if not isinstance(self.quality_profile_id, int) or self.quality_profile_id <= 0:
            raise ValueError("AddDefaults needs a positive quality profile id")


@dataclass(frozen=True)
class SyncOutcome:
    """Result of one add attempt. item is None for direct (non-list) adds."""
    item: Optional[ListItem]
    ok: bool
    reason: Optional[Reason] = None
    record: Optional[CandidateRecord] = None
    message: Optional[str] = None

    @property
    def status(self) -> str:
        """Terminal state name: added, exists, not_found, unsupported or error."""
        if self.ok:
            return 'added'
        return self.reason.value if self.reason else Reason.ERROR.value

    def to_dict(self) -> dict:
        return {
            'item': self.item.to_dict() if self.item else None,
            'ok': self.ok,
            'reason': self.reason.value if self.reason else None,
            'record': self.record.to_dict() if self.record else None,
            'message': self.message,
        }

"""
Catalog lookup adapters.

Wrap the Radarr/Sonarr lookup endpoints and turn their loosely shaped
responses into CandidateRecord values. Transport failures and empty results
are not errors here: they come back as an empty list or None and the caller
decides what that means.
"""

import logging
from typing import Any, Dict, List, Optional

from .api_client import ArrAPIError
from .config import DEFAULT_IMAGE_PROTOCOL, IMAGE_CDN_BASE
from .images import collect_record_images, make_image_urls
from .models import CandidateRecord, ExternalIds, Source, normalize_imdb_id

logger = logging.getLogger('listarr')

# Interactive searches show at most this many results
MAX_SEARCH_RESULTS = 20


def _first(*values) -> Any:
    for value in values:
        if value not in (None, '', 0):
            return value
    return None


def _to_int(value) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


class CatalogAdapter:
    """Shared normalization and error handling for both catalogs."""

    kind = 'item'

    def __init__(self, client, image_protocol: str = DEFAULT_IMAGE_PROTOCOL,
                 image_cdn_base: str = IMAGE_CDN_BASE):
        self.client = client
        self.image_protocol = image_protocol
        self.image_cdn_base = image_cdn_base

    @classmethod
    def from_settings(cls, client, settings) -> 'CatalogAdapter':
        return cls(client, image_protocol=settings.image_protocol,
                   image_cdn_base=settings.image_cdn_base)

    def _images(self, raw: Dict) -> List[str]:
        return make_image_urls(collect_record_images(raw),
                               protocol=self.image_protocol,
                               cdn_base=self.image_cdn_base)

    def normalize(self, raw: Dict) -> CandidateRecord:
        raise NotImplementedError

    def _safe_lookup(self, description: str, func, *args) -> List[Dict]:
        try:
            results = func(*args)
        except ArrAPIError as e:
            logger.warning(f"{self.client.api_name} {self.kind} lookup failed for {description}: {e}")
            return []
        return [r for r in (results or []) if isinstance(r, dict)]

    def lookup_by_term(self, term: str) -> List[CandidateRecord]:
        """
        Free-text search.

        Args:
            term: Search text

        Returns:
            Up to MAX_SEARCH_RESULTS normalized records (empty on failure)
        """
        term = (term or '').strip()
        if not term:
            return []
        logger.info(f"Searching {self.client.api_name} {self.kind}s: \"{term}\"")
        results = self._safe_lookup(f'"{term}"', self.client.lookup, term)
        records = [self.normalize(r) for r in results[:MAX_SEARCH_RESULTS]]
        logger.info(f"{self.client.api_name} lookup returned {len(records)} results for \"{term}\"")
        return records


class MovieCatalog(CatalogAdapter):
    """Movie lookups through Radarr (IMDb and TMDb ids)."""

    kind = 'movie'
    supported_sources = (Source.IMDB, Source.TMDB)

    def normalize(self, raw: Dict) -> CandidateRecord:
        return CandidateRecord(
            title=_first(raw.get('title'), raw.get('originalTitle'), raw.get('titleSlug')),
            external_ids=ExternalIds(
                tmdb_id=_to_int(raw.get('tmdbId')),
                imdb_id=raw.get('imdbId') or None,
            ),
            year=_to_int(raw.get('year')),
            overview=raw.get('overview') or None,
            image_urls=self._images(raw),
            service_id=_to_int(raw.get('id')),
            raw=raw,
        )

    def lookup_by_external_id(self, source: Source, external_id: str) -> Optional[CandidateRecord]:
        """
        Resolve one movie by IMDb or TMDb id.

        Args:
            source: Source.IMDB or Source.TMDB
            external_id: Id as stored on the list item

        Returns:
            First matching record, or None when nothing usable was found
        """
        source = Source(getattr(source, 'value', source))
        if source is Source.IMDB:
            imdb_id = normalize_imdb_id(external_id)
            results = self._safe_lookup(imdb_id, self.client.lookup_imdb, imdb_id)
        else:
            tmdb_id = _to_int(external_id)
            if tmdb_id is None:
                logger.warning(f"Invalid TMDB id: {external_id}")
                return None
            results = self._safe_lookup(f"tmdb:{tmdb_id}", self.client.lookup_tmdb, tmdb_id)

        if not results:
            return None
        return self.normalize(results[0])


class SeriesCatalog(CatalogAdapter):
    """Series lookups through Sonarr (IMDb ids via 'imdb:' search terms)."""

    kind = 'series'
    supported_sources = (Source.IMDB,)

    def normalize(self, raw: Dict) -> CandidateRecord:
        # Some lookup shapes nest the record under 'series'
        nested = raw.get('series') if isinstance(raw.get('series'), dict) else {}
        return CandidateRecord(
            title=_first(raw.get('title'), raw.get('seriesTitle'), nested.get('title'), raw.get('name')),
            external_ids=ExternalIds(
                tvdb_id=_to_int(_first(raw.get('tvdbId'), nested.get('tvdbId'), raw.get('remoteId'))),
                imdb_id=_first(raw.get('imdbId'), nested.get('imdbId')),
                tmdb_id=_to_int(_first(raw.get('tmdbId'), nested.get('tmdbId'))),
            ),
            year=_to_int(_first(raw.get('year'), nested.get('year'))),
            overview=_first(raw.get('overview'), nested.get('overview')),
            image_urls=self._images(raw),
            service_id=_to_int(raw.get('id')),
            raw=raw,
        )

    def lookup_by_external_id(self, source: Source, external_id: str) -> Optional[CandidateRecord]:
        """
        Resolve one series by IMDb id.

        Args:
            source: Only Source.IMDB is meaningful for Sonarr
            external_id: Id as stored on the list item

        Returns:
            First matching record, or None
        """
        source = Source(getattr(source, 'value', source))
        if source is not Source.IMDB:
            return None
        term = f"imdb:{normalize_imdb_id(external_id)}"
        results = self._safe_lookup(term, self.client.lookup, term)
        if not results:
            return None
        return self.normalize(results[0])

"""
Single-item add orchestration.

Drives one add attempt through lookup, default resolution, submission and,
on rejection, existence reconciliation. Every failure becomes a SyncOutcome;
nothing raised by a collaborator escapes add_item() or add_candidate().
"""

import html
import logging
from typing import Callable, Dict, Optional

from .api_client import ArrAPIError
from .catalog import MovieCatalog, SeriesCatalog
from .defaults import resolve_defaults
from .errors import AlreadyExistsError, ListarrError, NotFoundError, UnsupportedError
from .models import (
    CandidateRecord, ExternalIds, ListItem, Reason, Source, SyncOutcome, Target,
    normalize_imdb_id,
)
from .notify import NullNotifier
from .radarr import build_movie_payload, create_radarr_client
from .reconcile import reconcile_rejection
from .sonarr import build_series_payload, create_sonarr_client

logger = logging.getLogger('listarr')


def movie_candidate(tmdb_id, title: Optional[str] = None) -> CandidateRecord:
    """Candidate for a movie the user picked directly by TMDB id."""
    try:
        tmdb = int(tmdb_id)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid TMDB id: {tmdb_id}") from None
    if tmdb <= 0:
        raise ValueError(f"Invalid TMDB id: {tmdb_id}")
    return CandidateRecord(title=title or None, external_ids=ExternalIds(tmdb_id=tmdb))


def series_candidate(tvdb_id=None, imdb_id: Optional[str] = None,
                     title: Optional[str] = None) -> CandidateRecord:
    """Candidate for a series the user picked directly by TVDB id, IMDB id or title."""
    if not tvdb_id and not imdb_id and not title:
        raise ValueError("tvdb id, imdb id or title required")
    try:
        tvdb = int(tvdb_id) if tvdb_id else None
    except (TypeError, ValueError):
        raise ValueError(f"Invalid TVDB id: {tvdb_id}") from None
    return CandidateRecord(
        title=title or None,
        external_ids=ExternalIds(
            tvdb_id=tvdb,
            imdb_id=normalize_imdb_id(imdb_id) if imdb_id else None,
        ),
    )


class AddOrchestrator:
    """
    Adds list items (or directly chosen candidates) to one target.

    Args:
        target: Target this orchestrator submits to
        client: RadarrClient or SonarrClient
        catalog: MovieCatalog or SeriesCatalog wrapping the same client
        service_settings: ServiceSettings with root/quality fallbacks
        notifier: Object with notify(text); used for direct user actions only
        monitored: Monitor newly added titles
        season_folder: Use season folders (series only)
    """

    def __init__(self, target: Target, client, catalog, service_settings,
                 notifier=None, monitored: bool = True, season_folder: bool = True):
        self.target = target
        self.client = client
        self.catalog = catalog
        self.service_settings = service_settings
        self.notifier = notifier or NullNotifier()
        self.monitored = monitored
        self.season_folder = season_folder

    @classmethod
    def for_target(cls, target: Target, settings, notifier=None) -> 'AddOrchestrator':
        """
        Build an orchestrator from Settings.

        Raises:
            ConfigurationError: If the target service is not configured
        """
        if target is Target.RADARR:
            client = create_radarr_client(settings, required=True)
            catalog = MovieCatalog.from_settings(client, settings)
        else:
            client = create_sonarr_client(settings, required=True)
            catalog = SeriesCatalog.from_settings(client, settings)
        return cls(target, client, catalog, settings.service(target), notifier=notifier)

    def supports(self, source: Source) -> bool:
        return source in self.catalog.supported_sources

    def add_item(self, item: ListItem, notify: bool = False) -> SyncOutcome:
        """
        Resolve a list item and add it to the target.

        Args:
            item: List entry to add
            notify: Send a notification on added/exists (direct user actions)

        Returns:
            SyncOutcome; never raises
        """
        return self._attempt(item, lambda: self._resolve(item), notify=notify)

    def add_candidate(self, candidate: CandidateRecord,
                      root_folder_path: Optional[str] = None,
                      quality_profile_id: Optional[int] = None,
                      notify: bool = True) -> SyncOutcome:
        """
        Add a title the user picked directly (search result or explicit id).

        Args:
            candidate: Record carrying the ids (and ideally the title) to add
            root_folder_path: Override for the root folder
            quality_profile_id: Override for the quality profile
            notify: Send a notification on added/exists

        Returns:
            SyncOutcome whose item is None; never raises
        """
        def check():
            if self.target is Target.RADARR and not candidate.external_ids.tmdb_id:
                raise ValueError("tmdbId required")
            return candidate

        return self._attempt(None, check, notify=notify,
                             root_folder_path=root_folder_path,
                             quality_profile_id=quality_profile_id)

    def _resolve(self, item: ListItem) -> CandidateRecord:
        """
        Raises:
            UnsupportedError: The item's source cannot be added to this target
            NotFoundError: The catalog has no usable record for the item
        """
        if not self.supports(item.source):
            raise UnsupportedError(f"{item.source.value} ids cannot be added to {self.client.api_name}")

        candidate = self.catalog.lookup_by_external_id(item.source, item.external_id)
        if candidate is None:
            raise NotFoundError(f"Not found in {self.client.api_name}")
        if self.target is Target.RADARR and not candidate.external_ids.tmdb_id:
            raise NotFoundError("Lookup result has no TMDB id")
        return candidate

    def _attempt(self, item: Optional[ListItem], resolve: Callable[[], CandidateRecord],
                 notify: bool = False,
                 root_folder_path: Optional[str] = None,
                 quality_profile_id: Optional[int] = None) -> SyncOutcome:
        label = item.spec if item else 'direct add'
        candidate = None
        try:
            candidate = resolve()
            record = self._submit(candidate, root_folder_path, quality_profile_id)
        except AlreadyExistsError as e:
            if notify:
                self._notify(e.record or candidate, exists=True)
            return SyncOutcome(item=item, ok=False, reason=Reason.EXISTS, record=e.record,
                               message=None if e.record else str(e))
        except (UnsupportedError, NotFoundError) as e:
            logger.info(f"{label} -> {self.target.value}: {e}")
            reason = Reason.UNSUPPORTED if isinstance(e, UnsupportedError) else Reason.NOT_FOUND
            return SyncOutcome(item=item, ok=False, reason=reason, message=str(e))
        except (ListarrError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error adding {label} -> {self.target.value}: {e}")
            return SyncOutcome(item=item, ok=False, reason=Reason.ERROR, record=candidate, message=str(e))

        if notify:
            self._notify(record, exists=False)
        return SyncOutcome(item=item, ok=True, record=record)

    def _build_payload(self, candidate: CandidateRecord, defaults) -> Dict:
        if self.target is Target.RADARR:
            return build_movie_payload(candidate, defaults, monitored=self.monitored)
        return build_series_payload(candidate, defaults, monitored=self.monitored,
                                    season_folder=self.season_folder)

    def _post(self, payload: Dict) -> Optional[Dict]:
        if self.target is Target.RADARR:
            return self.client.add_movie(payload)
        return self.client.add_series(payload)

    def _submit(self, candidate: CandidateRecord,
                root_folder_path: Optional[str] = None,
                quality_profile_id: Optional[int] = None) -> CandidateRecord:
        """
        Post one add request.

        Returns:
            The stored record (the candidate if the service echoed nothing back)

        Raises:
            AlreadyExistsError: The service already has the title
            ArrAPIError: Any other rejection or transport failure
        """
        defaults = resolve_defaults(self.client, self.service_settings,
                                    root_folder_path=root_folder_path,
                                    quality_profile_id=quality_profile_id)
        payload = self._build_payload(candidate, defaults)
        ids = ' '.join(f"{k}:{v}" for k, v in candidate.external_ids.as_dict().items()) or '-'
        logger.info(
            f"Adding to {self.client.api_name}: {candidate.title or '-'} {ids} "
            f"root:{defaults.root_folder_path} qp:{defaults.quality_profile_id}"
        )

        try:
            stored = self._post(payload)
        except ArrAPIError as e:
            logger.warning(f"{self.client.api_name} add rejected: {e}")
            result = reconcile_rejection(self.target, self.client, e, payload, self.catalog.normalize)
            if not result.exists:
                raise
            if result.record is None:
                raise AlreadyExistsError("Already exists; stored record not found") from e
            raise AlreadyExistsError(
                f"{result.record.display_title} is already in {self.client.api_name}",
                record=result.record
            ) from e

        record = self.catalog.normalize(stored) if isinstance(stored, dict) and stored else candidate
        logger.info(f"{self.client.api_name} add success: {record.display_title} id:{record.service_id}")
        return record

    def _notify(self, record: CandidateRecord, exists: bool) -> None:
        kind = 'Movie' if self.target is Target.RADARR else 'Series'
        verb = 'already in' if exists else 'added to'
        ids = record.external_ids
        if self.target is Target.RADARR:
            id_line = f"TMDB: {ids.tmdb_id or 'n/a'}"
        else:
            id_line = f"TVDB: {ids.tvdb_id or 'n/a'}"
        text = f"{kind} {verb} {self.client.api_name}: <b>{html.escape(record.title or 'Unknown')}</b>\n{id_line}"
        try:
            self.notifier.notify(text)
        except Exception as e:
            logger.error(f"Notification failed: {e}")

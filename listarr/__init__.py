"""
Listarr Package.

Curated watch-lists synced into Radarr (movies) and Sonarr (series).
The public API is re-exported here.
"""

# Config
from .config import (
    __version__,
    Settings,
    ServiceSettings,
    TelegramSettings,
    build_settings,
    load_config,
)

# Errors
from .errors import (
    ListarrError,
    NotFoundError,
    AlreadyExistsError,
    UnsupportedError,
    TransportError,
    ConfigurationError,
    ListStoreError,
)

# Models
from .models import (
    Source,
    Target,
    Reason,
    ListItem,
    ExternalIds,
    CandidateRecord,
    AddDefaults,
    SyncOutcome,
    normalize_imdb_id,
    parse_id_spec,
)

# Images
from .images import (
    make_image_url,
    make_image_urls,
)

# Service clients
from .api_client import ArrAPIError
from .radarr import (
    RadarrAPIError,
    RadarrClient,
    build_movie_payload,
    create_radarr_client,
)
from .sonarr import (
    SonarrAPIError,
    SonarrClient,
    build_series_payload,
    create_sonarr_client,
)

# Reconciliation engine
from .catalog import MovieCatalog, SeriesCatalog
from .defaults import fetch_service_meta, resolve_defaults
from .reconcile import ReconcileResult, reconcile_rejection
from .orchestrator import AddOrchestrator, movie_candidate, series_candidate
from .sync import sync_items, sync_list

# Collaborators
from .store import ListStore
from .notify import NullNotifier, TelegramNotifier, create_notifier

__all__ = [
    # Config
    '__version__',
    'Settings',
    'ServiceSettings',
    'TelegramSettings',
    'build_settings',
    'load_config',
    # Errors
    'ListarrError',
    'NotFoundError',
    'AlreadyExistsError',
    'UnsupportedError',
    'TransportError',
    'ConfigurationError',
    'ListStoreError',
    # Models
    'Source',
    'Target',
    'Reason',
    'ListItem',
    'ExternalIds',
    'CandidateRecord',
    'AddDefaults',
    'SyncOutcome',
    'normalize_imdb_id',
    'parse_id_spec',
    # Images
    'make_image_url',
    'make_image_urls',
    # Clients
    'ArrAPIError',
    'RadarrAPIError',
    'RadarrClient',
    'build_movie_payload',
    'create_radarr_client',
    'SonarrAPIError',
    'SonarrClient',
    'build_series_payload',
    'create_sonarr_client',
    # Engine
    'MovieCatalog',
    'SeriesCatalog',
    'fetch_service_meta',
    'resolve_defaults',
    'ReconcileResult',
    'reconcile_rejection',
    'AddOrchestrator',
    'movie_candidate',
    'series_candidate',
    'sync_items',
    'sync_list',
    # Collaborators
    'ListStore',
    'NullNotifier',
    'TelegramNotifier',
    'create_notifier',
]

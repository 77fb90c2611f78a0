"""
Existence reconciliation for rejected add requests.

When Radarr or Sonarr rejects an add because the title is already in the
library, look up the stored record so the caller gets the same answer it
would have received from a successful add. The lookup tries three strategies
in order and stops at the first match:

1. the service's own library filtered by the submitted id
2. a lookup search by id, keeping only exact id matches
3. a scan of the whole library (series also match on title)
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .api_client import ArrAPIError
from .models import CandidateRecord, Target
from .radarr import MOVIE_EXISTS_CODE
from .sonarr import SERIES_EXISTS_CODE

logger = logging.getLogger('listarr')

EXISTS_CODES = (MOVIE_EXISTS_CODE, SERIES_EXISTS_CODE)
EXISTS_MESSAGE_PATTERN = re.compile(r'already\s+been\s+added', re.IGNORECASE)


@dataclass(frozen=True)
class ReconcileResult:
    exists: bool
    record: Optional[CandidateRecord] = None
    strategy: Optional[str] = None


def _error_entries(payload) -> List[Dict]:
    if isinstance(payload, list):
        return [e for e in payload if isinstance(e, dict)]
    if isinstance(payload, dict):
        return [payload]
    return []


def find_exists_error(payload) -> Optional[Dict]:
    """
    Return the validation entry signalling "already exists", if any.

    Matches on the structured error code, or a case-insensitive
    "already been added" message.
    """
    for entry in _error_entries(payload):
        if entry.get('errorCode') in EXISTS_CODES:
            return entry
        message = entry.get('errorMessage') or entry.get('message') or ''
        if EXISTS_MESSAGE_PATTERN.search(str(message)):
            return entry
    return None


def _same_int(a, b) -> bool:
    try:
        return a is not None and b is not None and int(a) == int(b)
    except (TypeError, ValueError):
        return False


def _same_imdb(a, b) -> bool:
    return bool(a) and bool(b) and str(a).lower() == str(b).lower()


def _run_strategies(client, strategies: Iterable) -> Optional[tuple]:
    for name, fetch, match in strategies:
        try:
            entries = fetch()
        except ArrAPIError as e:
            logger.warning(f"{client.api_name} reconcile step '{name}' failed: {e}")
            continue
        found = next((entry for entry in entries or [] if isinstance(entry, dict) and match(entry)), None)
        if found:
            return name, found
    return None


def _movie_strategies(client, submitted: Dict, exists_entry: Dict):
    tmdb_id = submitted.get('tmdbId')
    if not tmdb_id:
        placeholders = exists_entry.get('formattedMessagePlaceholderValues') or {}
        tmdb_id = placeholders.get('propertyValue')
    if not tmdb_id:
        return []

    def match(entry):
        return _same_int(entry.get('tmdbId'), tmdb_id)

    return [
        ('library filter', lambda: client.get_movies(tmdb_id=tmdb_id), match),
        ('lookup', lambda: client.lookup(f"tmdb:{tmdb_id}"), match),
        ('library scan', client.get_movies, match),
    ]


def _series_strategies(client, submitted: Dict):
    tvdb_id = submitted.get('tvdbId')
    imdb_id = submitted.get('imdbId')
    title = (submitted.get('title') or '').strip().lower()

    def match_id(entry):
        if tvdb_id:
            return _same_int(entry.get('tvdbId'), tvdb_id)
        return _same_imdb(entry.get('imdbId'), imdb_id)

    def match_scan(entry):
        if (tvdb_id or imdb_id) and match_id(entry):
            return True
        return bool(title) and (entry.get('title') or '').strip().lower() == title

    strategies = []
    if tvdb_id:
        strategies.append(('library filter', lambda: client.get_series(tvdb_id=tvdb_id), match_id))
    if tvdb_id or imdb_id:
        term = f"tvdb:{tvdb_id}" if tvdb_id else f"imdb:{imdb_id}"
        strategies.append(('lookup', lambda: client.lookup(term), match_id))
    strategies.append(('library scan', client.get_series, match_scan))
    return strategies


def reconcile_rejection(target: Target, client, error: ArrAPIError, submitted: Dict,
                        normalize: Callable[[Dict], CandidateRecord]) -> ReconcileResult:
    """
    Decide whether a rejected add means "already present" and find the stored record.

    Args:
        target: Target the add was submitted to
        client: RadarrClient or SonarrClient
        error: The rejection raised by the add call
        submitted: Request body that was rejected
        normalize: Turns a raw service record into a CandidateRecord

    Returns:
        ReconcileResult(exists=False) when the rejection is unrelated;
        otherwise exists=True with the stored record when one was found
    """
    exists_entry = find_exists_error(getattr(error, 'payload', None))
    if exists_entry is None:
        return ReconcileResult(exists=False)

    if target is Target.RADARR:
        strategies = _movie_strategies(client, submitted, exists_entry)
    else:
        strategies = _series_strategies(client, submitted)

    found = _run_strategies(client, strategies)
    if not found:
        logger.info(f"{client.api_name} reports the title exists but no stored record was found")
        return ReconcileResult(exists=True)

    strategy, raw = found
    record = normalize(raw)
    logger.info(f"{client.api_name} already has {record.display_title} (id:{record.service_id}, via {strategy})")
    return ReconcileResult(exists=True, record=record, strategy=strategy)

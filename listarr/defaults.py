"""
Default root folder and quality profile resolution.

Precedence for each value: explicit override, then the first entry the
service reports, then the configured fallback.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from .api_client import ArrAPIError
from .models import AddDefaults

logger = logging.getLogger('listarr')


def _fetch_or_empty(client, what: str, func) -> List[Dict]:
    try:
        return [entry for entry in (func() or []) if isinstance(entry, dict)]
    except ArrAPIError as e:
        logger.warning(f"{client.api_name} {what} query failed, using fallback: {e}")
        return []


def fetch_service_meta(client) -> Dict[str, List[Dict]]:
    """
    Fetch root folders and quality profiles concurrently.

    A failure in either query yields an empty list for that query only.

    Returns:
        {"rootFolders": [...], "qualityProfiles": [...]}
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        roots_future = executor.submit(_fetch_or_empty, client, 'rootfolder', client.get_root_folders)
        profiles_future = executor.submit(_fetch_or_empty, client, 'qualityprofile', client.get_quality_profiles)
        return {
            "rootFolders": roots_future.result(),
            "qualityProfiles": profiles_future.result(),
        }


def _positive_int(value) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def resolve_defaults(client, service_settings,
                     root_folder_path: Optional[str] = None,
                     quality_profile_id: Optional[int] = None) -> AddDefaults:
    """
    Pick the root folder and quality profile for one add request.

    Not cached: every add re-queries the service so newly created folders
    and profiles are picked up.

    Args:
        client: RadarrClient or SonarrClient
        service_settings: ServiceSettings holding the configured fallbacks
        root_folder_path: Caller override for the root folder
        quality_profile_id: Caller override for the quality profile

    Returns:
        AddDefaults with a non-empty path and a positive profile id
    """
    root_override = (root_folder_path or '').strip() or None
    quality_override = _positive_int(quality_profile_id)

    meta = fetch_service_meta(client)

    root = root_override
    if not root:
        root = next((f.get('path') for f in meta['rootFolders'] if f.get('path')), None)
    if not root:
        root = service_settings.root_folder

    quality = quality_override
    if not quality:
        quality = next(
            (pid for pid in (_positive_int(p.get('id')) for p in meta['qualityProfiles']) if pid),
            None
        )
    if not quality:
        quality = _positive_int(service_settings.quality_profile_id) or 1

    logger.debug(f"{client.api_name} add defaults: root={root} qualityProfileId={quality}")
    return AddDefaults(root_folder_path=root, quality_profile_id=quality)

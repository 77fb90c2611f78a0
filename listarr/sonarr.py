"""
Sonarr API client for Listarr.
Handles series lookups and adding list series to Sonarr.
"""

import logging
from typing import Dict, Optional, List

from .api_client import ArrAPIError, BaseAPIClient
from .errors import ConfigurationError
from .models import AddDefaults, CandidateRecord

logger = logging.getLogger('listarr')

# Validation code Sonarr returns when the series is already in the library
SERIES_EXISTS_CODE = 'SeriesExistsValidator'


class SonarrAPIError(ArrAPIError):
    """Raised when Sonarr API request fails."""
    pass


class SonarrClient(BaseAPIClient):
    """
    Sonarr API client for looking up and adding TV shows.

    Uses API key authentication (no OAuth required).
    """

    api_name = "Sonarr"
    exception_class = SonarrAPIError

    def get_series(self, tvdb_id: Optional[int] = None) -> List[Dict]:
        """
        Get series in Sonarr, optionally filtered by TVDB ID.

        Args:
            tvdb_id: Only return the series with this TVDB ID

        Returns:
            List of series dictionaries
        """
        params = {"tvdbId": tvdb_id} if tvdb_id else None
        return self._get_list("series", params=params)

    def lookup(self, term: str) -> List[Dict]:
        """
        Series search. Use 'imdb:tt1234567' or 'tvdb:12345' terms for id lookups.

        Returns:
            List of lookup records, possibly empty
        """
        return self._get_list("series/lookup", params={"term": term})

    def add_series(self, payload: Dict) -> Dict:
        """
        Add a series to Sonarr.

        Args:
            payload: Body built by build_series_payload()

        Returns:
            Created series data

        Raises:
            SonarrAPIError: If add fails (payload holds the validation errors)
        """
        return self._make_request("POST", "series", data=payload)


def build_series_payload(candidate: CandidateRecord, defaults: AddDefaults,
                         monitored: bool = True, season_folder: bool = True) -> Dict:
    """
    Build the POST /series body for a resolved candidate.

    The series is identified by TVDB ID when known, otherwise by IMDB ID,
    otherwise by title alone.

    Args:
        candidate: Lookup record (or bare ids/title from the user)
        defaults: Resolved root folder and quality profile
        monitored: Whether to monitor the series
        season_folder: Use season folders

    Returns:
        Request body dict
    """
    ids = candidate.external_ids
    data = {}
    if ids.tvdb_id:
        data["tvdbId"] = int(ids.tvdb_id)
    elif ids.imdb_id:
        data["imdbId"] = ids.imdb_id
    if candidate.title:
        data["title"] = candidate.title

    data.update({
        "rootFolderPath": defaults.root_folder_path,
        "qualityProfileId": defaults.quality_profile_id,
        "seasonFolder": season_folder,
        "monitored": monitored,
        "addOptions": {"searchForMissingEpisodes": True},
    })
    return data


def create_sonarr_client(settings, required: bool = False) -> Optional[SonarrClient]:
    """
    Create a Sonarr client from settings.

    Args:
        settings: Settings value holding the 'sonarr' service settings
        required: Raise instead of returning None when not configured

    Returns:
        SonarrClient if configured, None otherwise

    Raises:
        ConfigurationError: If required and Sonarr is not configured
    """
    sonarr = settings.sonarr
    if not sonarr.is_configured:
        if required:
            raise ConfigurationError("Sonarr is not configured (set SONARR_URL and SONARR_APIKEY)")
        return None
    return SonarrClient(sonarr.url, sonarr.api_key)

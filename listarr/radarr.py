"""
Radarr API client for Listarr.
Handles movie lookups and adding list movies to Radarr.
"""

import logging
from typing import Dict, Optional, List

from .api_client import ArrAPIError, BaseAPIClient
from .errors import ConfigurationError
from .models import AddDefaults, CandidateRecord

logger = logging.getLogger('listarr')

# Validation code Radarr returns when the movie is already in the library
MOVIE_EXISTS_CODE = 'MovieExistsValidator'


class RadarrAPIError(ArrAPIError):
    """Raised when Radarr API request fails."""
    pass


class RadarrClient(BaseAPIClient):
    """
    Radarr API client for looking up and adding movies.

    Uses API key authentication (no OAuth required).
    """

    api_name = "Radarr"
    exception_class = RadarrAPIError

    def get_movies(self, tmdb_id: Optional[int] = None) -> List[Dict]:
        """
        Get movies in Radarr, optionally filtered by TMDB ID.

        Args:
            tmdb_id: Only return the movie with this TMDB ID

        Returns:
            List of movie dictionaries
        """
        params = {"tmdbId": tmdb_id} if tmdb_id else None
        return self._get_list("movie", params=params)

    def lookup(self, term: str) -> List[Dict]:
        """
        Free-text movie search ('tmdb:<id>' and 'imdb:<id>' terms also work).

        Returns:
            List of lookup records, possibly empty
        """
        return self._get_list("movie/lookup", params={"term": term})

    def lookup_imdb(self, imdb_id: str) -> List[Dict]:
        """
        Look up a movie by IMDB ID.

        Args:
            imdb_id: IMDB ID (e.g., "tt0111161")

        Returns:
            Lookup records (Radarr returns a single object; it is wrapped)
        """
        return self._get_list("movie/lookup/imdb", params={"imdbid": imdb_id})

    def lookup_tmdb(self, tmdb_id: int) -> List[Dict]:
        """
        Look up a movie by TMDB ID.

        Args:
            tmdb_id: TMDB ID

        Returns:
            Lookup records (Radarr returns a single object; it is wrapped)
        """
        return self._get_list("movie/lookup/tmdb", params={"tmdbid": tmdb_id})

    def add_movie(self, payload: Dict) -> Dict:
        """
        Add a movie to Radarr.

        Args:
            payload: Body built by build_movie_payload()

        Returns:
            Created movie data

        Raises:
            RadarrAPIError: If add fails (payload holds the validation errors)
        """
        return self._make_request("POST", "movie", data=payload)


def build_movie_payload(candidate: CandidateRecord, defaults: AddDefaults,
                        monitored: bool = True) -> Dict:
    """
    Build the POST /movie body for a resolved candidate.

    Args:
        candidate: Lookup record with a TMDB ID
        defaults: Resolved root folder and quality profile
        monitored: Whether to monitor the movie

    Returns:
        Request body dict
    """
    return {
        "tmdbId": int(candidate.external_ids.tmdb_id),
        "title": candidate.title or "Unknown",
        "rootFolderPath": defaults.root_folder_path,
        "qualityProfileId": defaults.quality_profile_id,
        "monitored": monitored,
        "addOptions": {"searchForMovie": True},
    }


def create_radarr_client(settings, required: bool = False) -> Optional[RadarrClient]:
    """
    Create a Radarr client from settings.

    Args:
        settings: Settings value holding the 'radarr' service settings
        required: Raise instead of returning None when not configured

    Returns:
        RadarrClient if configured, None otherwise

    Raises:
        ConfigurationError: If required and Radarr is not configured
    """
    radarr = settings.radarr
    if not radarr.is_configured:
        if required:
            raise ConfigurationError("Radarr is not configured (set RADARR_URL and RADARR_APIKEY)")
        return None
    return RadarrClient(radarr.url, radarr.api_key)

"""
Base API client for the Radarr and Sonarr integrations.
Provides common functionality for rate limiting, request handling, and error parsing.
"""

import logging
import threading
import time
import requests
from typing import Any, Dict, List, Optional

from .errors import TransportError

logger = logging.getLogger('listarr')


class ArrAPIError(TransportError):
    """
    Raised when a media manager request fails.

    Attributes:
        status_code: HTTP status, or None for network failures
        payload: Parsed JSON body of the failed response, if any
    """
    pass


class BaseAPIClient:
    """
    Base class for *arr API clients with rate limiting and request handling.

    Subclasses should:
    - Set `api_name` class attribute for error messages
    - Set `exception_class` class attribute for raising appropriate exceptions
    """

    api_name: str = "API"
    exception_class: type = ArrAPIError
    rate_limit_delay: float = 0.1
    request_timeout: int = 30
    api_prefix: str = "api/v3"

    def __init__(self, url: str, api_key: str):
        """
        Initialize client.

        Args:
            url: Service base URL (e.g., http://localhost:7878)
            api_key: Service API key
        """
        self.url = url.rstrip('/')
        self.api_key = api_key
        self._last_request_time = 0
        self._rate_lock = threading.Lock()

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests."""
        return {
            "Content-Type": "application/json",
            "X-Api-Key": self.api_key
        }

    def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        with self._rate_lock:
            elapsed = time.time() - self._last_request_time
            if elapsed < self.rate_limit_delay:
                time.sleep(self.rate_limit_delay - elapsed)
            self._last_request_time = time.time()

    def _build_url(self, endpoint: str) -> str:
        return f"{self.url}/{self.api_prefix}/{endpoint}"

    def _parse_error_response(self, response: requests.Response):
        """
        Parse error message and payload from response body.

        Handles common patterns:
        - List with 'errorMessage' key (validation failures)
        - Dict with 'message' or 'error' key

        Returns:
            Tuple of (message, parsed payload or None)
        """
        error_msg = response.text
        payload = None
        try:
            payload = response.json()
            if isinstance(payload, list) and payload and isinstance(payload[0], dict):
                error_msg = payload[0].get('errorMessage', error_msg)
            elif isinstance(payload, dict):
                error_msg = payload.get('message', payload.get('error', error_msg))
        except ValueError as e:
            logger.debug(f"Failed to parse error response JSON: {e}")
        return error_msg, payload

    def _handle_response(self, response: requests.Response) -> Any:
        """
        Handle HTTP response, raising exceptions for errors.

        Returns:
            Parsed JSON response or None for 204/404

        Raises:
            exception_class: For HTTP errors
        """
        if response.status_code == 401:
            raise self.exception_class("Invalid API key", status_code=401)
        elif response.status_code == 404:
            return None
        elif response.status_code >= 400:
            error_msg, payload = self._parse_error_response(response)
            raise self.exception_class(
                f"API error {response.status_code}: {error_msg}",
                status_code=response.status_code,
                payload=payload,
            )

        if response.status_code == 204:
            return None

        return response.json()

    def _make_request(self, method: str, endpoint: str,
                      data: Optional[Dict] = None,
                      params: Optional[Dict] = None) -> Any:
        """
        Make an API request with rate limiting and error handling.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            endpoint: API endpoint (without base URL)
            data: Request body data
            params: Query parameters

        Returns:
            Response JSON data

        Raises:
            exception_class: If request fails
        """
        self._rate_limit()

        try:
            response = requests.request(
                method=method,
                url=self._build_url(endpoint),
                headers=self._get_headers(),
                json=data,
                params=params,
                timeout=self.request_timeout
            )
            return self._handle_response(response)

        except requests.exceptions.Timeout:
            raise self.exception_class(f"Request timeout after {self.request_timeout}s")
        except requests.exceptions.ConnectionError:
            raise self.exception_class(f"Could not connect to {self.api_name} at {self.url}")
        except requests.exceptions.RequestException as e:
            raise self.exception_class(f"Request failed: {e}")

    def _get_list(self, endpoint: str, params: Optional[Dict] = None) -> List[Dict]:
        """GET an endpoint that returns a list; a single object is wrapped."""
        result = self._make_request("GET", endpoint, params=params)
        if result is None:
            return []
        if isinstance(result, dict):
            return [result]
        return list(result)

    def test_connection(self) -> bool:
        """
        Test connection to the service.

        Returns:
            True if connection successful

        Raises:
            exception_class: If connection fails
        """
        result = self._make_request("GET", "system/status")
        if result:
            logger.debug(f"Connected to {self.api_name} v{result.get('version', 'unknown')}")
            return True
        return False

    def get_root_folders(self) -> List[Dict]:
        """
        Get available root folders.

        Returns:
            List of root folder dictionaries with 'id' and 'path'
        """
        return self._get_list("rootfolder")

    def get_quality_profiles(self) -> List[Dict]:
        """
        Get available quality profiles.

        Returns:
            List of quality profile dictionaries with 'id' and 'name'
        """
        return self._get_list("qualityprofile")

"""GlotPress HTTP client."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from ...config import config
from ...errors import ConfigurationError, GlotPressError

logger = logging.getLogger(__name__)


class GlotPressClient:
    """Client for the public export and API endpoints of a GlotPress install."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        """
        Initialize the GlotPress client.

        Args:
            session: HTTP session to use (a new one if not provided)
            timeout: Request timeout in seconds. If not provided, uses GLOTSYNC_HTTP_TIMEOUT.
        """
        self.session = session or requests.Session()
        self.timeout = timeout or config.http_timeout

    def export_translations(
        self,
        project_url: str,
        locale: str,
        file_format: str = "strings",
        status: str = "current",
    ) -> str:
        """
        Download the translations of one locale.

        Args:
            project_url: URL of the GlotPress project
            locale: GlotPress locale code (e.g. "zh-cn")
            file_format: Export format ("strings", "po", ...)
            status: Only export translations with this status

        Returns:
            The exported file content
        """
        url = f"{project_url.rstrip('/')}/{locale}/default/export-translations/"
        params = {"format": file_format, "filters[status]": status}
        response = self._get(url, params)
        response.encoding = "utf-8"
        return response.text

    def project_details(self, project_url: str) -> Dict[str, Any]:
        """
        Get the API description of a project, including its translation sets.

        Args:
            project_url: URL of the GlotPress project (`https://host/projects/...`)

        Returns:
            Decoded JSON document
        """
        url = self.api_url(project_url)
        response = self._get(url)
        try:
            return response.json()
        except ValueError as e:
            raise GlotPressError(f"Invalid JSON from {url}: {e}", url=url) from e

    @staticmethod
    def api_url(project_url: str) -> str:
        """Map `https://host/projects/x/` to `https://host/api/projects/x/`."""
        parts = urlsplit(project_url)
        if not parts.path.startswith("/projects/"):
            raise ConfigurationError(f"Not a GlotPress project URL: {project_url}")
        return urlunsplit(parts._replace(path="/api" + parts.path))

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
        logger.debug("GET %s %s", url, params or "")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise GlotPressError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code >= 400:
            raise GlotPressError(
                f"GlotPress returned HTTP {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )
        return response

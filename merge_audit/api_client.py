"""GitHub API client for making requests and handling pagination."""

import logging
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import DEFAULT_API_URL
from .errors import AuthenticationError, PermanentApiError
from .retry import RetryPolicy, error_from_text

PER_PAGE = 100
REQUEST_TIMEOUT = 60
LOW_RATE_LIMIT_THRESHOLD = 500


class GitHubAPIClient:
    """Read-only GitHub REST client; every request goes through a RetryPolicy."""

    def __init__(self, token: str = None, base_url: str = DEFAULT_API_URL,
                 session: requests.Session = None, retry_policy: RetryPolicy = None):
        """Initialize the GitHub API client.

        Args:
            token: GitHub personal access token for authentication
            base_url: REST API root, e.g. https://api.github.com or a GHES /api/v3 URL
            session: Pre-built session (tests pass a Mock here)
            retry_policy: Policy applied to every request
        """
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.retry_policy = retry_policy or RetryPolicy()

        if session is None:
            session = requests.Session()
            # Only connection setup is retried here; status codes are left to retry_policy
            adapter = HTTPAdapter(max_retries=Retry(connect=3, read=0, status=0, backoff_factor=0.3))
            session.mount('https://', adapter)
            session.mount('http://', adapter)
        self.session = session

        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
        })
        if self.token:
            self.session.headers.update({'Authorization': f'token {self.token}'})
            logging.debug("Initialized GitHub API client with token")
        else:
            logging.warning("No GitHub token provided. Set GITHUB_TOKEN to authenticate.")

    def _url(self, path: str) -> str:
        if path.startswith('http://') or path.startswith('https://'):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def describe_error(response: requests.Response) -> str:
        """Turn an error response into text the retry classifier can read."""
        try:
            body = response.json()
            message = body.get('message') if isinstance(body, dict) else None
        except ValueError:
            message = None
        if not message:
            message = (response.text or '')[:300]
        return f"HTTP {response.status_code} {response.reason or ''}: {message}"

    def _get_once(self, url: str, params: Dict = None):
        """Perform a single GET and return the decoded JSON body."""
        try:
            response = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise error_from_text(f"{type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            raise error_from_text(self.describe_error(response))
        try:
            return response.json()
        except ValueError as e:
            body = (response.text or '')[:200]
            raise PermanentApiError(f"Invalid JSON from {url} (HTTP {response.status_code}): {body!r}") from e

    def get_json(self, path: str, params: Dict = None):
        """Fetch a single API resource.

        Args:
            path: API path relative to base_url (or an absolute URL)
            params: Query parameters

        Returns:
            Parsed JSON response
        """
        url = self._url(path)
        return self.retry_policy.call(lambda: self._get_once(url, params), f"GET {url}")

    def get_paginated(self, path: str, params: Dict = None) -> List[Dict]:
        """Fetch all pages of a paginated GitHub API endpoint.

        Args:
            path: API path relative to base_url
            params: Query parameters

        Returns:
            List of all items from all pages, in API order
        """
        results = []
        page = 1
        params = dict(params or {})
        params['per_page'] = PER_PAGE

        while True:
            params['page'] = page
            logging.debug(f"Fetching page {page} from {path}")
            data = self.get_json(path, dict(params))

            if not isinstance(data, list):
                raise PermanentApiError(f"Expected a list from {path}, got {type(data).__name__}")
            if not data:
                break

            results.extend(data)

            if len(data) < PER_PAGE:
                break
            page += 1

        logging.debug(f"Fetched {len(results)} total items from {path}")
        return results

    def check_authentication(self) -> str:
        """Verify the token by requesting the authenticated user.

        Returns:
            The login of the authenticated user

        Raises:
            AuthenticationError: If there is no token or GitHub rejects it
        """
        if not self.token:
            raise AuthenticationError("GITHUB_TOKEN is not set.")
        try:
            response = self.session.get(self._url('/user'), timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise AuthenticationError(f"Could not reach GitHub to verify the token: {e}") from e
        if response.status_code in (401, 403):
            raise AuthenticationError(f"GitHub rejected the token ({self.describe_error(response)})")
        if response.status_code >= 400:
            raise AuthenticationError(self.describe_error(response))
        login = response.json().get('login', '')
        logging.info(f"Authenticated to GitHub as {login}")
        return login

    def rate_limit_remaining(self) -> Optional[int]:
        """Remaining core API requests, or None if GitHub did not say."""
        try:
            data = self.session.get(self._url('/rate_limit'), timeout=REQUEST_TIMEOUT).json()
            return int(data['resources']['core']['remaining'])
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as e:
            logging.debug(f"Could not read rate limit: {e}")
            return None

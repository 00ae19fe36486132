"""HTTP client for the cohort grading data service."""

import logging
from typing import Any, Optional

import httpx

from .models import StudentWeekRecord, WeeklyAttendanceSummary
from .parsers import (
    MalformedPayloadError,
    parse_error_detail,
    parse_roster,
    parse_student_count,
    parse_weekly_attendance,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"


class DashboardAPIError(Exception):
    """Raised when a request fails in transport or is rejected by the server."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class DashboardAuthError(DashboardAPIError):
    """Raised when the login request is rejected."""

    pass


class DashboardClient:
    """Async client for the weekly grading endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the data service (e.g., http://localhost:8080)
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=None,
                transport=self._transport,
                headers={
                    "User-Agent": "CohortDashboard/0.1.0",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and check its status.

        Raises:
            DashboardAPIError: On transport failure or a non-2xx response
        """
        client = await self._get_client()
        logger.debug("%s %s", method, path)
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise DashboardAPIError(f"Request to {path} failed: {e}")

        if not response.is_success:
            detail = parse_error_detail(response.text)
            raise DashboardAPIError(
                f"Server error: {response.status_code} - {detail}",
                status_code=response.status_code,
                detail=detail,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Response from {response.url.path} is not JSON: {e}")

    async def login(self, gmail: str) -> None:
        """Check that ``gmail`` belongs to an admin.

        Raises:
            DashboardAuthError: If the server rejects the address
        """
        try:
            await self._request("POST", "/login", json={"gmail": gmail})
        except DashboardAPIError as e:
            if e.status_code is None:
                raise
            message = e.detail if e.detail.strip() and _is_message(e.detail) else "Access denied"
            raise DashboardAuthError(message, status_code=e.status_code, detail=e.detail)

    async def get_weekly_data(self, week: int) -> list[StudentWeekRecord]:
        """Get the roster for a week.

        Raises:
            DashboardAPIError: If the request fails
            MalformedPayloadError: If any entry cannot be normalized
        """
        response = await self._request("GET", f"/weekly_data/{week}")
        return parse_roster(self._json(response), week)

    async def save_weekly_data(self, week: int, entries: list[dict]) -> Any:
        """Replace the server's data for a week with ``entries``.

        Returns:
            The decoded response body, or the raw text if it is not JSON
        """
        response = await self._request("POST", f"/weekly_data/{week}", json=entries)
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get_student_count(self) -> int:
        response = await self._request("GET", "/students/count")
        return parse_student_count(self._json(response))

    async def get_weekly_attendance(self) -> list[WeeklyAttendanceSummary]:
        response = await self._request("GET", "/attendance/weekly_counts")
        return parse_weekly_attendance(self._json(response))


def _is_message(detail: str) -> bool:
    # Server messages are short plain text; HTML error pages are not shown.
    return not detail.lstrip().startswith("<")

"""
Base API client with common functionality
"""

from typing import Optional, Dict, Any, Union, List
import httpx
from todo_manager.config.constants import REQUEST_TIMEOUT
from todo_manager.utils.error_handler import StoreFault, error_for_status
from todo_manager.utils.logger import logger

JSONData = Union[Dict[str, Any], List[Any]]


class BaseAPIClient:
    """Base class for JSON API clients"""

    def __init__(
        self,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base API client

        Args:
            base_url: Base URL for API
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests plug the ASGI app in here)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.logger = logger

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the error message from a failed response"""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP error! status: {response.status_code}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[JSONData] = None,
    ) -> JSONData:
        """
        Make one HTTP request; failures are not retried

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint
            headers: Request headers
            params: Query parameters
            json_data: JSON body

        Returns:
            Response data

        Raises:
            ValidationError: On 4xx responses other than 404
            NotFoundError: On 404 responses
            StoreFault: On 5xx responses and when the request never completed
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        self.logger.debug(f"Request: {method} {url}")

        request_kwargs = {
            "method": method,
            "url": url,
            "headers": headers,
            "params": params,
        }

        if json_data is not None:
            request_kwargs["json"] = json_data
            self.logger.debug(f"Request JSON data: {json_data}")

        try:
            response = await self.client.request(**request_kwargs)
        except httpx.RequestError as e:
            self.logger.error(f"Request error: {method} {url}: {e}")
            raise StoreFault(f"Request failed: {e}") from e

        self.logger.debug(f"Response status: {response.status_code}")

        if response.status_code >= 400:
            message = self._error_message(response)
            self.logger.warning(f"{method} {url} failed with status {response.status_code}: {message}")
            raise error_for_status(response.status_code, message)

        # Handle empty response (204 No Content or empty body)
        if response.status_code == 204 or not response.content.strip():
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise StoreFault(f"Invalid JSON in response from {url}") from e

    async def get(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> JSONData:
        """Make GET request"""
        return await self._request("GET", endpoint, headers=headers, params=params)

    async def post(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        json_data: Optional[JSONData] = None,
    ) -> JSONData:
        """Make POST request"""
        return await self._request("POST", endpoint, headers=headers, json_data=json_data)

    async def put(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        json_data: Optional[JSONData] = None,
    ) -> JSONData:
        """Make PUT request"""
        return await self._request("PUT", endpoint, headers=headers, json_data=json_data)

    async def delete(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONData:
        """Make DELETE request"""
        return await self._request("DELETE", endpoint, headers=headers)

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

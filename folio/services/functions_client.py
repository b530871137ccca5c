"""
HTTP clients for the two serverless functions.

The publishing workflow never talks to image processing or email directly;
it calls the deployed functions over HTTP:

- ImageTransformClient -> POST {"image_url"} -> {"url"}
- NotificationClient   -> POST {"post_id", "user_id"} -> {"message"}

Calls are single-shot: no retries, no timeouts beyond httpx's defaults.
"""

from typing import Any, Dict, Iterator, Optional

import httpx
import structlog

from folio.core.config import settings
from folio.core import context

logger = structlog.get_logger(__name__)


class FunctionCallError(Exception):
    """A function call failed (transport error, non-2xx, or unusable body)."""


class ImageTransformError(FunctionCallError):
    pass


class NotificationError(FunctionCallError):
    pass


class FunctionClient:
    error_class = FunctionCallError

    def __init__(self, url: str, auth_token: str = "", http: Optional[httpx.Client] = None):
        self.url = url
        self.auth_token = auth_token
        self._http = http or httpx.Client()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        correlation_id = context.outbound_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        return headers

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._http.post(self.url, json=payload, headers=self._headers())
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Function returned error", url=self.url, status_code=e.response.status_code)
            raise self.error_class(f"{self.url} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Function call failed", url=self.url, error=str(e))
            raise self.error_class(f"{self.url} unreachable: {e}") from e
        except ValueError as e:
            raise self.error_class(f"{self.url} returned invalid JSON") from e

    def close(self) -> None:
        self._http.close()


class ImageTransformClient(FunctionClient):
    error_class = ImageTransformError

    def process(self, image_url: str) -> str:
        """Return the URL of the normalized copy of ``image_url``."""
        data = self._post({"image_url": image_url})
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise ImageTransformError("Image function returned no url")
        return url


class NotificationClient(FunctionClient):
    error_class = NotificationError

    def send(self, post_id: str, user_id: str) -> Dict[str, Any]:
        """Ask the notification function to email the author about a publish."""
        data = self._post({"post_id": post_id, "user_id": user_id})
        if not isinstance(data, dict):
            raise NotificationError("Notification function returned an unexpected body")
        logger.info("Publish notification requested", post_id=post_id, result=data.get("message"))
        return data


def get_image_client() -> Iterator[ImageTransformClient]:
    """Per-request client; its connection pool is closed once the response is sent."""
    client = ImageTransformClient(settings.IMAGE_FUNCTION_URL, settings.FUNCTIONS_AUTH_TOKEN)
    try:
        yield client
    finally:
        client.close()


def get_notification_client() -> Iterator[NotificationClient]:
    client = NotificationClient(settings.NOTIFICATION_FUNCTION_URL, settings.FUNCTIONS_AUTH_TOKEN)
    try:
        yield client
    finally:
        client.close()

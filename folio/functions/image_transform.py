"""
process-image function.

POST {"image_url": "..."} -> {"url": "..."}

Downloads the source image, normalises it to a 1200x630 JPEG (cropped to
fill, quality 80), uploads it under ``processed/processed-<millis>.jpg``
and returns the public URL. Any failure yields
500 {"error": "Failed to process image"}; nothing is uploaded unless the
fetch and resize both succeeded.
"""

import time
from typing import Callable, Optional

import httpx
import structlog
from fastapi import FastAPI, Request
from starlette.concurrency import run_in_threadpool

from folio.core.errors import capture_exception
from folio.core.logging_config import configure_logging
from folio.functions.common import json_response, preflight_response
from folio.schemas import ImageTransformRequest
from folio.services.images import resize_to_cover
from folio.services.storage import ObjectStorage, get_storage

logger = structlog.get_logger(__name__)

PROCESSED_PREFIX = "processed"
ERROR_MESSAGE = "Failed to process image"


class ImageTransformHandler:
    def __init__(
        self,
        storage: ObjectStorage,
        http: Optional[httpx.Client] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self._http = http
        self._clock = clock

    def fetch(self, image_url: str) -> bytes:
        if self._http is not None:
            response = self._http.get(image_url)
        else:
            with httpx.Client(follow_redirects=True) as http:
                response = http.get(image_url)
        response.raise_for_status()
        return response.content

    def handle(self, image_url: str) -> str:
        source = self.fetch(image_url)
        processed = resize_to_cover(source)

        file_name = f"processed-{int(self._clock() * 1000)}.jpg"
        key = f"{PROCESSED_PREFIX}/{file_name}"
        self.storage.upload(key, processed, content_type="image/jpeg")

        url = self.storage.public_url(key)
        logger.info("Image processed", source=image_url, key=key, size=len(processed))
        return url


def create_app(handler: Optional[ImageTransformHandler] = None) -> FastAPI:
    """Build the function app; without a handler one is built from settings on first use."""
    configure_logging()
    app = FastAPI(title="process-image")
    state = {"handler": handler}

    def get_handler() -> ImageTransformHandler:
        if state["handler"] is None:
            state["handler"] = ImageTransformHandler(get_storage())
        return state["handler"]

    @app.options("/")
    def preflight():
        return preflight_response()

    @app.post("/")
    async def process_image(request: Request):
        try:
            payload = ImageTransformRequest.model_validate(await request.json())
            url = await run_in_threadpool(get_handler().handle, payload.image_url)
        except Exception as e:
            capture_exception(e, "process_image")
            return json_response({"error": ERROR_MESSAGE}, status_code=500)

        return json_response({"url": url})

    return app

import logging
from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from folio.core.config import settings
from folio.core.logging_config import configure_logging
from folio.core.errors import init_sentry
from folio.api import posts, profiles, categories, uploads
from folio.functions import image_transform, notification
from folio.middleware.context import RequestContextMiddleware

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info("Folio API Starting (%s)", settings.ENVIRONMENT)
    logger.info("=" * 50)
    init_sentry(settings.SENTRY_DSN, environment=settings.ENVIRONMENT)
    yield


# The JSON API. Its CORS policy (credentialed, listed origins) must not
# apply to the functions, which answer every origin with "*".
api = FastAPI(title=settings.PROJECT_NAME, openapi_url="/openapi.json")

origins = [
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:5173",
    settings.FRONTEND_URL,
]
origins = list(set([o for o in origins if o]))

api.add_middleware(
    cast(Any, CORSMiddleware),
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

api.include_router(posts.router, prefix="/posts", tags=["posts"])
api.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
api.include_router(categories.router, prefix="/categories", tags=["categories"])
api.include_router(uploads.router, prefix="/uploads", tags=["uploads"])

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan, openapi_url=None)
app.add_middleware(cast(Any, RequestContextMiddleware))

app.mount(settings.API_V1_STR, api)
# Local stand-ins for the separately deployed functions
app.mount("/functions/process-image", image_transform.create_app())
app.mount("/functions/send-notification", notification.create_app())


@app.get("/")
def root():
    return {"message": "Welcome to Folio API"}


@app.get("/health")
def health():
    return {"status": "healthy"}

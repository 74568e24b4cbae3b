import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from freshcart.api.v1.routers.assistant import router as assistant_router
from freshcart.api.v1.routers.health import router as health_router
from freshcart.api.v1.routers.interactions import router as interactions_router
from freshcart.api.v1.routers.recommendations import router as recommendations_router
from freshcart.core.config import get_settings
from freshcart.core.lifespan import lifespan
from freshcart.core.logging import configure_logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS is a CSV, e.g. "https://shop.example.com,https://www.shop.example.com"
allowed_origins = settings.allowed_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["http://localhost:5173"],  # storefront dev server
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# ------- Routes -------
app.include_router(health_router)
app.include_router(recommendations_router)
app.include_router(interactions_router)
app.include_router(assistant_router)

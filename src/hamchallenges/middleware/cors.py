"""CORS configuration for the admin web UI and app clients."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hamchallenges.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id", "X-Challenge-Version", "ETag", "X-RateLimit-Remaining", "X-RateLimit-Limit"],
    )

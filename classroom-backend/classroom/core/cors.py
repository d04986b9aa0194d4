from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from .config import settings


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "X-User-Id"],
        max_age=3600,
    )

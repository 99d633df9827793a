import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import entries as entries_router
from .routers import stakeholders as stakeholders_router
from .routers import tags as tags_router
from .routers import narratives as narratives_router
from .routers import insights as insights_router
from .middleware.auth import APIKeyMiddleware
from .middleware.ratelimit import RateLimitMiddleware
from .middleware.logging import LoggingMiddleware


app = FastAPI(title="impact-narrative", version="0.1.0")

# Configure CORS - localhost for development, explicit origins for production
app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=86400,
    )
else:
    allowed = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=86400,
    )

# The last middleware added runs first: logging wraps auth, which runs before
# rate limiting so limits are tracked per user.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(APIKeyMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(entries_router.router)
app.include_router(stakeholders_router.router)
app.include_router(tags_router.router)
app.include_router(narratives_router.router)
app.include_router(insights_router.router)


@app.get("/__health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"message": "impact-narrative API is running. See /__health and /docs."}

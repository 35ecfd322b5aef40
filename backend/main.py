import os

from fastapi.openapi.utils import get_openapi
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()  # This reads .env into os.environ

from beatbookings.main import app  # noqa: E402


def custom_openapi() -> dict:
    """Return OpenAPI schema with project metadata."""
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title="BeatBookings Live API",
        version="1.0.0",
        description=("API for discovering artists, booking them for events and publishing events."),
        contact={"name": "BeatBookings Live Support", "email": "support@beatbookings.live"},
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi

if __name__ == "__main__":
    import uvicorn

    workers = int(os.getenv("UVICORN_WORKERS", "1"))
    keepalive = int(os.getenv("UVICORN_KEEPALIVE", "65"))
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        workers=workers,
        timeout_keep_alive=keepalive,
    )

"""
App assembly entry point.

Loads ``.env`` and re-exports the FastAPI `app` from `storefront.api.main`
so `uvicorn app:app` works from the service directory.
"""
from dotenv import load_dotenv

load_dotenv()

from storefront.api.main import app  # noqa: E402,F401

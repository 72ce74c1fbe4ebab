"""
FastAPI app assembly: middleware, exception handlers and router wiring.
"""
import logging
import os

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)


from storefront.api.admin_blog import router as admin_blog_router
from storefront.api.admin_content import router as admin_content_router
from storefront.api.admin_media import router as admin_media_router
from storefront.api.admin_pages import router as admin_pages_router
from storefront.api.admin_popups import router as admin_popups_router
from storefront.api.admin_products import router as admin_products_router
from storefront.api.admin_reviews import router as admin_reviews_router
from storefront.api.admin_settings import router as admin_settings_router
from storefront.api.admin_subscribers import router as admin_subscribers_router
from storefront.api.auth import router as auth_router
from storefront.api.deps import ADMIN_SESSION_COOKIE, PREVIEW_SESSION_COOKIE, RateLimitExceeded
from storefront.api.public import router as public_router
from storefront.api.site import router as site_router
from storefront.api.templating import STATIC_DIR, templates
from storefront.utils.feature_flags import get_feature_flags
from storefront.utils.runtime import cookies_secure, dev_mode_active
from storefront.utils.security import is_valid_token_format

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Archie's Remedies Storefront",
    description="Marketing site, content admin and lead capture for Archie's Remedies.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
    "https://archiesremedies.com",
    "https://www.archiesremedies.com",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware: reject admin API calls without a well-formed session cookie
@app.middleware("http")
async def require_admin_session_cookie(request: Request, call_next):
    path = request.url.path or ""
    if path.startswith("/api/admin") and not path.startswith("/api/admin/auth") and not dev_mode_active():
        if not is_valid_token_format(request.cookies.get(ADMIN_SESSION_COOKIE)):
            return JSONResponse(
                {"detail": "Authentication required"},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
    return await call_next(request)


# Middleware: a ?token= on a public page becomes a preview session cookie
@app.middleware("http")
async def preview_token_to_cookie(request: Request, call_next):
    response = await call_next(request)
    path = request.url.path or ""
    token = request.query_params.get("token")
    if (
        token
        and request.method == "GET"
        and not path.startswith("/api")
        and not path.startswith("/admin")
        and not path.startswith("/static")
    ):
        response.set_cookie(
            PREVIEW_SESSION_COOKIE, token, httponly=True, samesite="lax", secure=cookies_secure(), path="/",
        )
    return response


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    retry_after = exc.result.retry_after_seconds()
    return JSONResponse(
        {"detail": exc.detail, "retry_after_seconds": retry_after},
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(retry_after)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    path = request.url.path or ""
    if exc.status_code == status.HTTP_404_NOT_FOUND and not path.startswith("/api"):
        return templates.TemplateResponse(request, "404.html", {}, status_code=status.HTTP_404_NOT_FOUND)
    return JSONResponse(
        {"detail": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
def health_check():
    return {"status": "ok", "features": get_feature_flags()}


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(auth_router)
app.include_router(public_router)
app.include_router(admin_pages_router)
app.include_router(admin_products_router)
app.include_router(admin_popups_router)
app.include_router(admin_subscribers_router)
app.include_router(admin_content_router)
app.include_router(admin_reviews_router)
app.include_router(admin_blog_router)
app.include_router(admin_settings_router)
app.include_router(admin_media_router)
# Site routes end with a catch-all page route, so they are registered last
app.include_router(site_router)

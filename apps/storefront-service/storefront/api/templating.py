"""Jinja2 environment shared by the HTML routes."""
from pathlib import Path

from fastapi.templating import Jinja2Templates

from storefront.utils.media import format_editorial_date, format_reading_time, get_video_type, is_video_url

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["editorial_date"] = format_editorial_date
templates.env.filters["reading_time"] = format_reading_time
templates.env.filters["video_type"] = get_video_type
templates.env.tests["video_url"] = is_video_url

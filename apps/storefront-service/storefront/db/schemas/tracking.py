from typing import Literal

from .base import APIModel


class TrackEvent(APIModel):
    type: Literal['pageview', 'click']
    path: str | None = None
    referrer: str | None = None
    destination_url: str | None = None
    product_id: str | None = None
    product_slug: str | None = None

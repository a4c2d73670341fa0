"""ASGI entrypoint for the listing creatives API."""

from listing_creatives.api.app import create_app
from listing_creatives.containers import build_container

app = create_app(build_container())

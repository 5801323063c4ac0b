"""ASGI entrypoint for the food radar API."""

from food_radar.api.app import create_app
from food_radar.containers import build_container

app = create_app(build_container())

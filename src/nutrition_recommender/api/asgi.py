"""ASGI entrypoint for the recommendation API."""

from nutrition_recommender.api.app import create_app
from nutrition_recommender.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the delivery KPI API."""

from delivery_kpi.api.app import create_app
from delivery_kpi.containers import build_container

app = create_app(build_container())

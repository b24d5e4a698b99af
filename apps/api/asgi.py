"""ASGI entry point: ``uvicorn apps.api.asgi:app``."""

# flake8: noqa: E501

from asgiref.wsgi import WsgiToAsgi

from apps.api.main import create_app

flask_app = create_app()
app = WsgiToAsgi(flask_app)

"""
HTTP layer: FastAPI app, routes, dependencies and the response envelope.

Import the app from ``campaigns.api.app``.
"""

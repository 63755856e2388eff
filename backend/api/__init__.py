"""
API module - routes and schemas.
Routes are split by domain: graph (editor session), pipeline (stateless validate/layout), settings.
"""

from .routes import register_routes

__all__ = ["register_routes"]

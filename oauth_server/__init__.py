# oauth_server/__init__.py

"""
OAuth2 authorization server.

Hexagonal layout: the domain and application layers implement the
RFC 6749 / RFC 7009 logic; the adapters expose it over FastAPI and
persist it with SQLAlchemy.
"""

__version__ = "1.0.0"

# oauth_server/adapters/outbound/security/__init__.py

from oauth_server.adapters.outbound.security.secret_manager import ClientSecretManager

__all__ = ["ClientSecretManager"]

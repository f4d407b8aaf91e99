# oauth_server/adapters/outbound/__init__.py

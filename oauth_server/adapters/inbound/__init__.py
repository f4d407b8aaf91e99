# oauth_server/adapters/inbound/__init__.py

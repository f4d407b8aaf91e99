# oauth_server/adapters/inbound/api/__init__.py

# oauth_server/adapters/__init__.py

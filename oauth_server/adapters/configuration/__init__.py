# oauth_server/adapters/configuration/__init__.py

# oauth_server/shared/__init__.py

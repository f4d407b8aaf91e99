# oauth_server/application/__init__.py

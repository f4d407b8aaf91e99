# oauth_server/adapters/outbound/persistence/__init__.py

# oauth_server/adapters/outbound/persistence/models/base_model.py

from sqlalchemy.orm import declarative_base

# Parent class of all ORM models, holds the metadata used by create_all and alembic
Base = declarative_base()

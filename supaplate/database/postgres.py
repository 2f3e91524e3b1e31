"""
Direct Postgres access for the few queries the Supabase API cannot answer
with the anon key, such as checking auth.users for an existing email.
"""
import logging

from sqlalchemy import Column, MetaData, Table, Text, create_engine, func, select
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.engine import Engine

from supaplate.config import settings

logger = logging.getLogger(__name__)

auth_metadata = MetaData(schema="auth")

auth_users = Table(
    "users",
    auth_metadata,
    Column("id", UUID(as_uuid=False), primary_key=True),
    Column("email", Text),
)

_engine: Engine = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(settings.database_url, pool_pre_ping=True)
    return _engine


def does_user_exist(email: str) -> bool:
    """True if an identity with this email is already registered."""
    query = select(func.count()).select_from(auth_users).where(auth_users.c.email == email)
    with get_engine().connect() as conn:
        total = conn.execute(query).scalar_one()
    return total > 0

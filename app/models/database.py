from sqlalchemy import Column, Integer, String, DateTime, Text, MetaData, Table
from sqlalchemy.sql import func

metadata = MetaData()


# Single flat table; only description changes after insert
products_table = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False),
    Column("attributes", Text, nullable=False),
    Column("description", Text, nullable=True),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    # ids are never reused after deletes
    sqlite_autoincrement=True,
)

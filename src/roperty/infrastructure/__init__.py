"""Infrastructure layer — database engine, schema, migrations, persistence.

This layer depends on stdlib and third-party libs (SQLAlchemy, Alembic).
It may import from domain but never from services, commands, or output.
The service layer bridges between the store facade and infrastructure.
"""

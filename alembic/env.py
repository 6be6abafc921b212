from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from app.db.session import build_engine, load_models

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = load_models()

# Callers may point a run at another database via ``sqlalchemy.url``.
override_url = config.get_main_option("sqlalchemy.url") or None


def _configure(**kwargs):
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


if context.is_offline_mode():
    from app.core.config import settings

    _configure(url=override_url or settings.DATABASE_URL, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = build_engine(override_url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()

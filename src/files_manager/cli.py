# cli.py
import logging

import click

from database.local import get_document_store, init_db
from files_manager.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


@click.group()
def cli():
    """Files manager service commands"""
    configure_logging(get_settings().log_level)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Deployment Mode: {settings.deployment_mode}")
    print(f"  Redis: {settings.redis_host}:{settings.redis_port}")
    if settings.deployment_mode == "local-dev":
        print(f"  Document Store: sqlite {settings.sqlite_path}")
    else:
        print(f"  Document Store: mongodb {settings.db_host}:{settings.db_port}/{settings.db_database}")
    print(f"  Folder Path: {settings.folder_path}")
    print(f"  Session TTL: {settings.session_ttl_seconds}s")
    print(f"  Workers: user={settings.user_lane_workers} file={settings.file_lane_workers}")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=5000, type=int, help="Port to listen on")
def serve(host, port):
    """Run the HTTP API with uvicorn"""
    import uvicorn

    from files_manager.main import create_app

    uvicorn.run(create_app(), host=host, port=port)


@cli.command(name="init-db")
def init_db_command():
    """Create document collections and indexes"""
    settings = get_settings()
    store = get_document_store(
        deployment_mode=settings.deployment_mode,
        sqlite_path=settings.sqlite_path,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_database,
    )
    try:
        init_db(store)
        print("✅ Collections and indexes ready")
    finally:
        store.close()


if __name__ == "__main__":
    cli()

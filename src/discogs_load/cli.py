import logging
import sys

import click
import coloredlogs
import psycopg

from discogs_load.config import DbConfig
from discogs_load.errors import DiscogsLoadError
from discogs_load.etl import run
from discogs_load.io import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


@click.command()
@click.argument("input_files", nargs=-1)
@click.option("--batch-size", default=None, type=click.IntRange(min=1), help="Number of rows per insert [env DISCOGS_BATCH_SIZE, default 10000]")
@click.option("--db-host", default=None, help="Database host [env DISCOGS_DB_HOST, default localhost]")
@click.option("--db-port", default=None, type=int, help="Database port [env DISCOGS_DB_PORT, default 5432]")
@click.option("--db-user", default=None, help="Database user [env DISCOGS_DB_USER, default dev]")
@click.option("--db-password", default=None, help="Database password [env DISCOGS_DB_PASSWORD]")
@click.option("--db-name", default=None, help="Database name [env DISCOGS_DB_NAME, default discogs]")
@click.option("--create-indexes", is_flag=True, default=False, help="Create the indexes instead of loading")
@click.option("--recover", is_flag=True, default=False, help="Keep parsing past XML syntax errors")
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, type=click.IntRange(min=1), show_default=True, help="Bytes read from the input at a time")
@click.option("--no-progress", is_flag=True, default=False, help="Disable the progress bar")
@click.option("--log-level", default="INFO", show_default=True, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def main(
    input_files,
    batch_size,
    db_host,
    db_port,
    db_user,
    db_password,
    db_name,
    create_indexes,
    recover,
    chunk_size,
    no_progress,
    log_level,
):
    """Bulk-load Discogs XML dumps (INPUT_FILES, paths or URLs) into PostgreSQL."""
    coloredlogs.install(level=log_level.upper())
    if not input_files and not create_indexes:
        raise click.UsageError("Give at least one dump to load, or --create-indexes.")

    try:
        config = DbConfig.from_env(
            host=db_host,
            user=db_user,
            password=db_password,
            name=db_name,
            port=db_port,
            batch_size=batch_size,
            create_indexes=create_indexes,
        )
        run(input_files, config, chunk_size=chunk_size, recover=recover, use_tqdm=not no_progress)
    except (DiscogsLoadError, ValueError, psycopg.Error) as e:
        logger.error(f"Ingestion failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

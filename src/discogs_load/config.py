import os
from dataclasses import dataclass

# Configuration for different Discogs data types
DISCOGS_CONFIGS = {
    'artist': {'root_tag': 'artists', 'item_tag': 'artist', 'expected_count': 8500000},
    'release': {'root_tag': 'releases', 'item_tag': 'release', 'expected_count': 14976967},
    'master': {'root_tag': 'masters', 'item_tag': 'master', 'expected_count': 2100000},
    'label': {'root_tag': 'labels', 'item_tag': 'label', 'expected_count': 1900000}
}

DEFAULT_BATCH_SIZE = 10000


@dataclass(frozen=True)
class DbConfig:
    """Connection and batching settings, fixed for the whole run."""
    host: str = 'localhost'
    user: str = 'dev'
    password: str = 'dev_pass'
    name: str = 'discogs'
    port: int = 5432
    batch_size: int = DEFAULT_BATCH_SIZE
    create_indexes: bool = False

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @classmethod
    def from_env(cls, **overrides) -> 'DbConfig':
        values = {
            'host': os.environ.get('DISCOGS_DB_HOST', cls.host),
            'user': os.environ.get('DISCOGS_DB_USER', cls.user),
            'password': os.environ.get('DISCOGS_DB_PASSWORD', cls.password),
            'name': os.environ.get('DISCOGS_DB_NAME', cls.name),
            'port': int(os.environ.get('DISCOGS_DB_PORT', cls.port)),
            'batch_size': int(os.environ.get('DISCOGS_BATCH_SIZE', cls.batch_size)),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

"""Create the database schema and storage directories."""

from silica_social.core.settings import settings
from silica_social.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    for directory in (settings.data_dir, settings.uploads_dir, settings.media_dir):
        directory.mkdir(parents=True, exist_ok=True)
    create_tables()


if __name__ == "__main__":
    init_db()
    print("Database initialized.")

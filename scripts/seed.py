"""Peuple la base configurée (DATABASE_URL / SQLITE_PATH) avec garage/db/seed_data.yaml."""

import sys

from garage.core.config import settings
from garage.core.logging_config import setup_logging
from garage.db.seed import DEFAULT_SEED_PATH, seed_all
from garage.db.session import Database


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    seed_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_SEED_PATH

    database = Database.from_settings(settings)
    database.connect()
    database.init_schema()
    with database.session() as session:
        seed_all(session, seed_path, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    database.dispose()


if __name__ == "__main__":
    main()

"""Create an empty token store file so the service can start on a fresh host.

    python -m token_service.seed_scripts.init_store [--path PATH] [--force]
"""
import argparse
import sys
from pathlib import Path
from token_service.common.logging_setup import get_logger, setup_logging, shutdown_logging
from token_service.config.settings import config_settings
from token_service.tokens.exceptions import PersistenceError
from token_service.tokens.persistence import save_tokens

logger = get_logger("livenet.seed")


def init_store(path: Path, force: bool = False, atomic: bool = True) -> bool:
    if path.exists() and not force:
        logger.info("seed.store_exists", extra={"path": str(path)})
        return False
    save_tokens(path, {}, atomic=atomic)
    logger.info("seed.store_created", extra={"path": str(path)})
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--path", default=config_settings.TOKEN_FILE_PATH)
    parser.add_argument("--force", action="store_true", help="overwrite an existing store with an empty one")
    args = parser.parse_args(argv)

    setup_logging()
    try:
        init_store(Path(args.path), force=args.force, atomic=config_settings.ATOMIC_WRITES)
    except PersistenceError:
        return 1
    finally:
        shutdown_logging()
    return 0


if __name__ == "__main__":
    sys.exit(main())

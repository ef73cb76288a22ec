import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Union
from pydantic import ValidationError
from token_service.tokens.constants import logger
from token_service.tokens.exceptions import PersistenceError, StartupError
from token_service.tokens.models import Token
from token_service.tokens.utils import is_valid_user_id

PathLike = Union[str, Path]


def load_tokens(path: PathLike) -> Dict[int, Token]:
    """
    Read the whole store file: a JSON object of decimal user id -> {"id", "value"}.
    Any problem with the file raises StartupError, there is no partial load.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StartupError(f"Cannot read token file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StartupError(f"Token file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise StartupError(f"Token file {path} must hold a JSON object")

    tokens: Dict[int, Token] = {}
    for key, item in data.items():
        if not is_valid_user_id(key):
            raise StartupError(f"Token file {path} has an invalid user id {key!r}")
        try:
            tokens[int(key)] = Token.model_validate(item)
        except ValidationError as e:
            raise StartupError(f"Token file {path} has an invalid token for user id {key}") from e

    logger.info("store.loaded", extra={"path": str(path), "count": len(tokens)})
    return tokens


def dump_tokens(tokens: Dict[int, Token]) -> str:
    return json.dumps({str(uid): token.model_dump() for uid, token in tokens.items()})


def save_tokens(path: PathLike, tokens: Dict[int, Token], atomic: bool = True) -> None:
    """
    Replace the store file with the full mapping.

    atomic=True writes a sibling temp file and renames it over the target so a
    crash leaves either the old or the new file. atomic=False overwrites in place.
    """
    path = Path(path)
    payload = dump_tokens(tokens)
    try:
        if atomic:
            _write_atomic(path, payload)
        else:
            path.write_text(payload, encoding="utf-8")
    except OSError as e:
        logger.error("store.save_failed", extra={"path": str(path), "error": str(e)})
        raise PersistenceError() from e

    logger.debug("store.saved", extra={"path": str(path), "count": len(tokens), "atomic": atomic})


def _write_atomic(path: Path, payload: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

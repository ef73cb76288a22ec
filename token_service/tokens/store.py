import threading
from pathlib import Path
from typing import Dict, Iterator, Optional, Union
from contextlib import contextmanager
from token_service.tokens import persistence
from token_service.tokens.constants import logger
from token_service.tokens.exceptions import TokenExistsError, TokenNotFoundError
from token_service.tokens.models import Token


class TokenStore:
    """
    In-memory map of user id -> Token, mirrored to a JSON file.

    The unconditional primitives (insert/replace/remove) leave precondition
    checks to the caller. create/rewrite/delete run check, mutation and file
    write as one unit under `_lock`, and restore the previous entry if the
    write fails.
    """

    def __init__(self, path: Union[str, Path], atomic: bool = True, tokens: Optional[Dict[int, Token]] = None):
        self.path = Path(path)
        self.atomic = atomic
        self._tokens: Dict[int, Token] = dict(tokens or {})
        self._lock = threading.RLock()

    @classmethod
    def from_file(cls, path: Union[str, Path], atomic: bool = True) -> "TokenStore":
        return cls(path, atomic=atomic, tokens=persistence.load_tokens(path))

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._tokens

    def snapshot(self) -> Dict[int, Token]:
        with self._lock:
            return dict(self._tokens)

    def get(self, user_id: int) -> Optional[Token]:
        return self._tokens.get(user_id)

    def insert(self, user_id: int, token: Token) -> None:
        with self._lock:
            self._tokens[user_id] = token

    def replace(self, user_id: int, token: Token) -> None:
        with self._lock:
            self._tokens[user_id] = token

    def remove(self, user_id: int) -> None:
        with self._lock:
            del self._tokens[user_id]

    def save(self) -> None:
        with self._lock:
            persistence.save_tokens(self.path, self._tokens, atomic=self.atomic)

    @contextmanager
    def _rollback_on_failure(self, user_id: int) -> Iterator[None]:
        previous = self._tokens.get(user_id)
        try:
            yield
        except Exception:
            if previous is None:
                self._tokens.pop(user_id, None)
            else:
                self._tokens[user_id] = previous
            logger.warning("store.rolled_back", extra={"user_id": user_id})
            raise

    def create(self, user_id: int, token: Token) -> Token:
        token = token.model_copy(update={"id": user_id})
        with self._lock:
            if user_id in self._tokens:
                raise TokenExistsError(user_id=user_id)
            with self._rollback_on_failure(user_id):
                self.insert(user_id, token)
                self.save()
        return token

    def rewrite(self, user_id: int, token: Token) -> Token:
        token = token.model_copy(update={"id": user_id})
        with self._lock:
            if user_id not in self._tokens:
                raise TokenNotFoundError(user_id=user_id)
            with self._rollback_on_failure(user_id):
                self.replace(user_id, token)
                self.save()
        return token

    def delete(self, user_id: int) -> Token:
        with self._lock:
            removed = self._tokens.get(user_id)
            if removed is None:
                raise TokenNotFoundError(user_id=user_id)
            with self._rollback_on_failure(user_id):
                self.remove(user_id)
                self.save()
        return removed

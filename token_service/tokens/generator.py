import random
from typing import Optional
from token_service.tokens.constants import SYMBOLS, TOKEN_LENGTH
from token_service.tokens.models import Token


class TokenGenerator:
    """
    Issues 128-char tokens drawn uniformly from `SYMBOLS`.

    One random source lives as long as the generator; it is never reseeded
    between calls. Defaults to `random.SystemRandom` (OS entropy); tests may
    pass a seeded `random.Random` for reproducible output.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.SystemRandom()

    def generate_value(self) -> str:
        return "".join(self._rng.choice(SYMBOLS) for _ in range(TOKEN_LENGTH))

    def generate(self) -> Token:
        # id stays 0, the store stamps the user id on insert
        return Token(value=self.generate_value())

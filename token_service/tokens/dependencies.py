from fastapi import HTTPException, Request, status
from token_service.tokens.constants import INVALID_USER_ID, logger
from token_service.tokens.generator import TokenGenerator
from token_service.tokens.store import TokenStore
from token_service.tokens.utils import is_valid_user_id


def parse_user_id(user_id: str) -> int:
    if not is_valid_user_id(user_id):
        logger.warning("request.invalid_user_id", extra={"raw_user_id": user_id[:64]})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_USER_ID)
    return int(user_id)


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.token_store


def get_token_generator(request: Request) -> TokenGenerator:
    return request.app.state.token_generator

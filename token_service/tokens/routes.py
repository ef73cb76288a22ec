from fastapi import APIRouter, Depends, status
from token_service.tokens.constants import TOKEN_DELETED, logger
from token_service.tokens.dependencies import get_token_generator, get_token_store, parse_user_id
from token_service.tokens.exceptions import TokenNotFoundError
from token_service.tokens.generator import TokenGenerator
from token_service.tokens.models import ErrorOut, MessageOut, TokenOut
from token_service.tokens.store import TokenStore

tokens_router = APIRouter()

error_responses = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorOut},
    status.HTTP_404_NOT_FOUND: {"model": ErrorOut},
    status.HTTP_409_CONFLICT: {"model": ErrorOut},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorOut},
}

# Handlers are sync on purpose: each request runs in the threadpool and the
# store lock serializes the mutating ones.


@tokens_router.get("/get/{user_id}", response_model=TokenOut, responses=error_responses)
def get_token(uid: int = Depends(parse_user_id), store: TokenStore = Depends(get_token_store)):
    token = store.get(uid)
    if token is None:
        logger.info("token.get.not_found", extra={"user_id": uid})
        raise TokenNotFoundError(user_id=uid)
    return TokenOut(token=token.value)


@tokens_router.get("/set/{user_id}", response_model=TokenOut, responses=error_responses)
def set_token(uid: int = Depends(parse_user_id), store: TokenStore = Depends(get_token_store),
              generator: TokenGenerator = Depends(get_token_generator)):

    token = store.create(uid, generator.generate())
    logger.info("token.created", extra={"user_id": uid})
    return TokenOut(token=token.value)


@tokens_router.get("/rewrite/{user_id}", response_model=TokenOut, responses=error_responses)
def rewrite_token(uid: int = Depends(parse_user_id), store: TokenStore = Depends(get_token_store),
                  generator: TokenGenerator = Depends(get_token_generator)):

    token = store.rewrite(uid, generator.generate())
    logger.info("token.rewritten", extra={"user_id": uid})
    return TokenOut(token=token.value)


@tokens_router.get("/delete/{user_id}", response_model=MessageOut, responses=error_responses)
def delete_token(uid: int = Depends(parse_user_id), store: TokenStore = Depends(get_token_store)):

    store.delete(uid)
    logger.info("token.deleted", extra={"user_id": uid})
    return MessageOut(message=TOKEN_DELETED)

from fastapi import APIRouter, Depends
from token_service.tokens.dependencies import get_token_store
from token_service.tokens.models import HealthOut
from token_service.tokens.store import TokenStore

home_router = APIRouter()


@home_router.get("/health", response_model=HealthOut)
async def health_check(store: TokenStore = Depends(get_token_store)):
    return HealthOut(status="healthy", tokens=len(store))

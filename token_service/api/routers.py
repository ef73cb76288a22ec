from fastapi import APIRouter
from token_service.tokens.routes import tokens_router
from token_service.common.routes import home_router


# token routes are served from the root: /get/{id}, /set/{id}, ...
public_routers = APIRouter()

public_routers.include_router(tokens_router, tags=["tokens"])
public_routers.include_router(home_router, tags=["home"])

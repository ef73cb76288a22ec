from pydantic import BaseModel, Field

from token_service.tokens.constants import TOKEN_LENGTH


class Token(BaseModel):
    id: int = 0
    value: str = Field(..., min_length=TOKEN_LENGTH, max_length=TOKEN_LENGTH, pattern=r"^[A-Za-z0-9]+$")

    model_config = {"frozen": True}


class TokenOut(BaseModel):
    token: str


class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: str


class HealthOut(BaseModel):
    status: str
    tokens: int

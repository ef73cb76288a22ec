from pydantic_settings import BaseSettings

class Settings(BaseSettings):

    ENV: str = "dev"                    # "dev" / "staging" / "prod"
    SERVICE_NAME: str = "livenet-tokens"
    TOKEN_FILE_PATH: str = "livenet_t.json"
    ATOMIC_WRITES: bool = True          # False -> overwrite the store file in place
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    class Config:
        env_file = ".env"
        extra="ignore"

config_settings = Settings()

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    db_auto_create: bool = Field(False, alias="DB_AUTO_CREATE")

    # Bulk import limits. Files are read fully into memory.
    import_max_rows: int = Field(5000, alias="IMPORT_MAX_ROWS")
    import_max_file_bytes: int = Field(5 * 1024 * 1024, alias="IMPORT_MAX_FILE_BYTES")
    # False: one transaction for the whole commit pass. True: commit after every row.
    import_commit_per_row: bool = Field(False, alias="IMPORT_COMMIT_PER_ROW")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

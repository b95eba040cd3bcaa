from pydantic import BaseModel, Field, ValidationError, field_validator

class StorageSettings(BaseModel):
    data_dir: str = "data"
    backup_dir: str = "data/backups"
    file_name: str = "workouts.csv"
    max_backups: int = Field(default=5, ge=1)
    auto_backup: bool = True
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

def validate_settings(data: dict) -> StorageSettings:
    try:
        return StorageSettings(**data)
    except ValidationError as e:
        raise ValueError(str(e))

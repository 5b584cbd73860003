from pydantic_settings import BaseSettings

from shared.constants import SRID_BD09, SRID_GCJ02, SRID_WGS84, DEFAULT_PORT


class Settings(BaseSettings):
    WGS84_SRID: int = SRID_WGS84
    GCJ02_SRID: int = SRID_GCJ02          # must match the SRID registered in spatial_ref_sys
    BD09_SRID: int = SRID_BD09
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = DEFAULT_PORT

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

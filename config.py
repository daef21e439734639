# 📦 config.py

from pydantic import Field
from pydantic_settings import BaseSettings


# ─────────────────────────────
# Settings
class Settings(BaseSettings):
    app_name: str = "SlotMatch"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    prometheus_port: int = 0  # 0 keeps the metrics server off
    audit_stability: bool = Field(False, validation_alias="MATCH_AUDIT_STABILITY")


settings = Settings()

"""
Configuration for the JMX transcoder service.

Loaded from:
1. Defaults (this file)
2. Environment variables (JMX_TRANSCODER_*) override defaults
"""
import contextlib
import os
from dataclasses import dataclass

ENV_PREFIX = "JMX_TRANSCODER_"


@dataclass
class Settings:
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB
    max_plans: int = 32  # plans kept in memory, least recently used evicted first
    # <jmeterTestPlan> attributes written for new plans
    jmx_version: str = "1.2"
    jmx_properties: str = "5.0"
    jmeter_version: str = "5.6.3"

    def envelope(self) -> dict:
        return {"version": self.jmx_version, "properties": self.jmx_properties, "jmeter": self.jmeter_version}


def load_settings() -> Settings:
    """Load settings from defaults and environment variable overrides."""
    settings = Settings()

    env_map = {
        "LOG_LEVEL": ("log_level", str),
        "HOST": ("host", str),
        "PORT": ("port", int),
        "MAX_UPLOAD_BYTES": ("max_upload_bytes", int),
        "MAX_PLANS": ("max_plans", int),
        "JMX_VERSION": ("jmx_version", str),
        "JMX_PROPERTIES": ("jmx_properties", str),
        "JMETER_VERSION": ("jmeter_version", str),
    }

    for key, (attr, conv) in env_map.items():
        val = os.environ.get(ENV_PREFIX + key)
        if val is None:
            continue
        # Malformed numbers keep the default
        with contextlib.suppress(ValueError):
            setattr(settings, attr, conv(val.strip()))

    settings.log_level = settings.log_level.upper()
    if settings.max_plans < 1:
        settings.max_plans = Settings.max_plans
    if settings.max_upload_bytes < 1:
        settings.max_upload_bytes = Settings.max_upload_bytes
    return settings

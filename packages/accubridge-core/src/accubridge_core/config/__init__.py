from .loader import load_config
from .models import (
    AccuBridgeConfig,
    AccuRevConfig,
    AccuWorkConfig,
    FieldMappingConfig,
)

__all__ = [
    "AccuBridgeConfig",
    "AccuRevConfig",
    "AccuWorkConfig",
    "FieldMappingConfig",
    "load_config",
]

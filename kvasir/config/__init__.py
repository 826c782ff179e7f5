from .loader import load_config
from .models import (
    DocumentConfig,
    KvasirConfig,
    ParsersConfig,
)

__all__ = [
    "DocumentConfig",
    "KvasirConfig",
    "ParsersConfig",
    "load_config",
]

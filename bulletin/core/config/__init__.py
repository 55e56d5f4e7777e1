__all__ = [
    "DatabaseSettings",
    "GradingSettings",
    "LoggingSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
]


from .grading import GradingSettings
from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import DatabaseSettings, StorageSettings

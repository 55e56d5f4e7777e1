__all__ = [
    "BootConfiguration",
    "BulletinContainer",
    "LoggingProvider",
    "Secrets",
    "Settings",
    "di",
]

from . import di
from .config import Secrets, Settings
from .container import BootConfiguration, BulletinContainer
from .provider import LoggingProvider

__all__ = [
    "BootConfiguration",
    "BulletinContainer",
    "GradingContainer",
    "PersistentContainer",
    "StorageContainer",
]

from .bulletin import BootConfiguration, BulletinContainer
from .grading import GradingContainer
from .storage import PersistentContainer, StorageContainer

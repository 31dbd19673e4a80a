from .errors import (
    AlreadyEnded,
    AlreadyRegistered,
    ElectionClosed,
    InvalidCandidate,
    NotEligible,
    NotRegistered,
    RegistryError,
    StorageError,
    Unauthorized,
)
from .registry import AdminPolicy, ElectionRegistry, RegistryState, SingleAdminPolicy

__version__ = "0.1.0"

"""Error kinds reported by the election registry.

Each error carries a stable ``code`` a client can branch on and the HTTP
status the caller interface answers with.
"""


class RegistryError(Exception):
    code = "registry_error"
    status_code = 400

    def __init__(self, detail: str = None):
        super().__init__(detail or self.default_detail())
        self.detail = str(self)

    @classmethod
    def default_detail(cls) -> str:
        return cls.code.replace("_", " ").capitalize() + "."


class Unauthorized(RegistryError):
    """Caller does not hold the admin role."""
    code = "unauthorized"
    status_code = 403


class NotRegistered(RegistryError):
    code = "not_registered"
    status_code = 404


class AlreadyRegistered(RegistryError):
    code = "already_registered"
    status_code = 409


class NotEligible(RegistryError):
    """Voter is unregistered, unverified or has already voted."""
    code = "not_eligible"
    status_code = 403


class ElectionClosed(RegistryError):
    code = "election_closed"
    status_code = 409


class InvalidCandidate(RegistryError):
    code = "invalid_candidate"
    status_code = 404


class AlreadyEnded(RegistryError):
    code = "already_ended"
    status_code = 409


class StorageError(Exception):
    """Registry state could not be read from or written to its backend."""
    code = "storage_error"
    status_code = 503

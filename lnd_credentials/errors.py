class CredentialsError(Exception):
    """Base class for failures to assemble credentials.

    `code` is a stable string callers can check against, `status` follows HTTP
    convention: 4xx when the request can't be satisfied, 5xx when the local system
    failed.
    """

    code = "FailedToGetCredentials"
    status = 503

    def __init__(self, message: str = None, **details):
        self.details = details
        super().__init__(message or self.code)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)!r}, code={self.code!r})"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "code": self.code,
            "message": str(self),
            **self.details,
        }


class ProfileNotFound(CredentialsError):
    """No saved credentials exist for the requested node.
    """

    code = "CredentialsForSpecifiedNodeNotFound"
    status = 400


class LoaderFailed(CredentialsError):
    """A default cert, macaroon or socket (or a saved profile) couldn't be read.
    """

    code = "FailedToLoadDefaultCredentials"
    status = 503


class DecryptionFailed(CredentialsError):
    code = "FailedToDecryptMacaroon"
    status = 503


class EncryptionFailed(CredentialsError):
    code = "FailedToEncryptMacaroon"
    status = 400


class RestrictionFailed(CredentialsError):
    code = "FailedToRestrictMacaroon"
    status = 400

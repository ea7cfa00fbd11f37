"""Exception taxonomy for the session layer."""


class SessionError(Exception):
    """Base class for every error raised by the session package."""


class ConfigurationError(SessionError, ValueError):
    """Raised while building the session configuration, e.g. a signing secret that is too short."""


class VerificationError(SessionError):
    """A cookie value could not be authenticated."""


class CookieMalformed(VerificationError):
    """The cookie value is too short or its digest prefix is not valid base64."""


class SignatureMismatch(VerificationError):
    """No configured key produced the digest carried by the cookie."""


class StoreError(SessionError):
    """A session store operation failed."""


class StoreUnavailable(StoreError):
    """The backing store could not be reached."""


class SessionInvariantError(SessionError, RuntimeError):
    """The session went missing from the request context before the response was finalised."""

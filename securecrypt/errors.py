class SecureCryptError(ValueError):
    """Base class for every failure raised by an encrypt/decrypt call."""


class IncorrectPasswordError(SecureCryptError):
    """The derived key does not match the one used at encryption time."""

    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message)


class InvalidFormatError(SecureCryptError):
    """Envelope fields are missing, mis-encoded or structurally unparsable."""


class ParameterOutOfRangeError(SecureCryptError):
    """Derivation parameters outside the allowed set."""

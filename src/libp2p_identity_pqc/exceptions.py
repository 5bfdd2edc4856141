"""Exception hierarchy for identity keys and PeerIds."""

from __future__ import annotations

from .key_type import KeyType


class IdentityError(Exception):
    """
    Base exception for all identity-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class DecodingError(IdentityError):
    """
    Raised when encoded key material cannot be decoded.

    Attributes:
        key_type: Algorithm whose payload was rejected, or None when the
            protobuf envelope itself is malformed.
        detail: Description of what went wrong.
    """

    def __init__(self, key_type: KeyType | None, detail: str) -> None:
        self.key_type = key_type
        self.detail = detail

        if key_type is None:
            msg = f"Failed to decode key: {detail}"
        else:
            msg = f"Failed to decode {key_type.name} key: {detail}"

        super().__init__(msg)


class UnsupportedKeyTypeError(DecodingError):
    """
    Raised when an encoded key carries an unknown or missing key type tag.

    Attributes:
        value: The raw tag value, or None if the tag was absent.
    """

    def __init__(self, value: int | None) -> None:
        self.value = value

        if value is None:
            detail = "missing key type"
        else:
            detail = f"unsupported key type {value}"

        super().__init__(None, detail)


class SigningError(IdentityError):
    """
    Raised when the signing engine refuses to produce a signature.

    Attributes:
        key_type: Algorithm of the keypair that failed to sign.
        detail: Description of what went wrong.
    """

    def __init__(self, key_type: KeyType, detail: str) -> None:
        self.key_type = key_type
        self.detail = detail
        super().__init__(f"Failed to sign with {key_type.name} key: {detail}")


class ErasedKeyError(SigningError):
    """
    Raised when a keypair is used after `erase()`.

    Signing and encoding both need the secret key, so both raise this error.
    It subclasses `SigningError` because signing is the usual caller.
    """

    def __init__(self, key_type: KeyType) -> None:
        super().__init__(key_type, "secret key material has been erased")


class KeyGenerationError(IdentityError):
    """
    Raised when fresh key material cannot be generated.

    Attributes:
        key_type: Algorithm being generated.
        detail: Description of what went wrong.
    """

    def __init__(self, key_type: KeyType, detail: str) -> None:
        self.key_type = key_type
        self.detail = detail
        super().__init__(f"Failed to generate {key_type.name} key: {detail}")


class OtherVariantError(IdentityError):
    """
    Raised when a key is converted to an algorithm it does not hold.

    Attributes:
        actual: Key type of the key.
        expected: Key type that was requested.
    """

    def __init__(self, actual: KeyType, expected: KeyType) -> None:
        self.actual = actual
        self.expected = expected
        super().__init__(f"Cannot convert {actual.name} key into {expected.name} key")


class ParseError(IdentityError):
    """Raised when a PeerId cannot be parsed from bytes or text."""

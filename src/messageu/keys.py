"""RSA key generation and serialization for MessageU."""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from .types import PUBLIC_KEY_SIZE

RSA_KEY_SIZE = 1024
RSA_PUBLIC_EXPONENT = 65537


class InvalidPublicKeyError(ValueError):
    """Public key bytes could not be parsed."""
    pass


def generate_keypair() -> RSAPrivateKey:
    """
    Generate a fresh 1024-bit RSA private key.

    Returns:
        The private key; its public half is available via public_key()
    """
    return rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )


def public_key_to_bytes(public_key: RSAPublicKey) -> bytes:
    """
    Serialize a public key into the fixed 160-byte wire field.

    The key is DER-encoded and zero-padded on the right.
    """
    der = public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.PKCS1,
    )
    if len(der) > PUBLIC_KEY_SIZE:
        raise InvalidPublicKeyError(
            f"Encoded public key is {len(der)} bytes (max {PUBLIC_KEY_SIZE})"
        )
    return der.ljust(PUBLIC_KEY_SIZE, b"\x00")


def _der_length(data: bytes) -> int:
    """Total length of the DER element at the start of data."""
    if len(data) < 2 or data[0] != 0x30:
        raise InvalidPublicKeyError("Public key is not a DER sequence")

    first = data[1]
    if first < 0x80:
        return 2 + first

    count = first & 0x7F
    if count == 0 or count > 4 or len(data) < 2 + count:
        raise InvalidPublicKeyError("Invalid DER length")
    return 2 + count + int.from_bytes(data[2 : 2 + count], byteorder="big")


def public_key_from_bytes(data: bytes) -> RSAPublicKey:
    """
    Load a public key from the 160-byte wire field.

    Accepts PKCS#1 and SubjectPublicKeyInfo DER; trailing zero padding
    is cut using the DER length prefix.

    Raises:
        InvalidPublicKeyError: If the bytes do not hold an RSA public key
    """
    length = _der_length(data)
    if length > len(data):
        raise InvalidPublicKeyError(
            f"DER length {length} exceeds {len(data)} available bytes"
        )

    try:
        key = serialization.load_der_public_key(bytes(data[:length]))
    except ValueError as e:
        raise InvalidPublicKeyError(str(e)) from e

    if not isinstance(key, RSAPublicKey):
        raise InvalidPublicKeyError("Public key is not an RSA key")
    return key


def private_key_to_bytes(private_key: RSAPrivateKey) -> bytes:
    """Serialize a private key as unencrypted PKCS#8 DER."""
    return private_key.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def private_key_from_bytes(data: bytes) -> RSAPrivateKey:
    """Load a DER private key (PKCS#8 or PKCS#1)."""
    key = serialization.load_der_private_key(data, password=None)
    if not isinstance(key, RSAPrivateKey):
        raise ValueError("Private key is not an RSA key")
    return key

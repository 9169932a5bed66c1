"""
Cipher primitives used by the key exchange.

- RSA-OAEP (SHA-1) protects the symmetric key exchange
- AES-128-CBC with a zero IV and PKCS#7 padding protects text and files
- Base64 encodes key material for the identity file
"""

import base64
import binascii
import os
from typing import Union

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .keys import InvalidPublicKeyError, public_key_from_bytes
from .types import SYMMETRIC_KEY_SIZE, MessageUError

AES_BLOCK_SIZE = 16

# Fixed IV shared by every MessageU client
AES_IV = bytes(AES_BLOCK_SIZE)


class EncryptionError(MessageUError):
    """Raised when encryption fails."""
    pass


class DecryptionError(MessageUError):
    """Raised when decryption fails."""
    pass


def _oaep() -> asym_padding.OAEP:
    return asym_padding.OAEP(
        mgf=asym_padding.MGF1(algorithm=hashes.SHA1()),
        algorithm=hashes.SHA1(),
        label=None,
    )


def rsa_encrypt(public_key: bytes, data: bytes) -> bytes:
    """
    Encrypt data for the holder of public_key.

    Args:
        public_key: The peer's 160-byte public key field
        data: Plaintext (at most 86 bytes for a 1024-bit key)

    Returns:
        Ciphertext

    Raises:
        EncryptionError: If the key is invalid or data is too long
    """
    try:
        key = public_key_from_bytes(public_key)
        return key.encrypt(bytes(data), _oaep())
    except (InvalidPublicKeyError, ValueError) as e:
        raise EncryptionError(f"RSA encryption failed: {e}") from e


def rsa_decrypt(private_key: RSAPrivateKey, data: bytes) -> bytes:
    """
    Decrypt RSA-OAEP ciphertext with our private key.

    Raises:
        DecryptionError: If the ciphertext is malformed or for another key
    """
    try:
        return private_key.decrypt(bytes(data), _oaep())
    except ValueError as e:
        raise DecryptionError("RSA decryption failed") from e


def generate_symmetric_key() -> bytes:
    """Generate a random 16-byte AES key."""
    return os.urandom(SYMMETRIC_KEY_SIZE)


def aes_encrypt(key: bytes, data: bytes) -> bytes:
    """
    Encrypt data with AES-128-CBC.

    Raises:
        EncryptionError: If the key has the wrong size
    """
    if len(key) != SYMMETRIC_KEY_SIZE:
        raise EncryptionError(f"Symmetric key must be {SYMMETRIC_KEY_SIZE} bytes, got {len(key)}")

    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(bytes(data)) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(AES_IV)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_decrypt(key: bytes, data: bytes) -> bytes:
    """
    Decrypt AES-128-CBC ciphertext.

    Raises:
        DecryptionError: On a bad key size, bad length or bad padding
    """
    if len(key) != SYMMETRIC_KEY_SIZE:
        raise DecryptionError(f"Symmetric key must be {SYMMETRIC_KEY_SIZE} bytes, got {len(key)}")
    if not data or len(data) % AES_BLOCK_SIZE:
        raise DecryptionError(f"Ciphertext length {len(data)} is not a multiple of {AES_BLOCK_SIZE}")

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(AES_IV)).decryptor()
        padded = decryptor.update(bytes(data)) + decryptor.finalize()

        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise DecryptionError("AES decryption failed") from e


def encode_text(data: bytes) -> str:
    """Base64-encode bytes."""
    return base64.b64encode(data).decode("ascii")


def decode_text(text: Union[str, bytes]) -> bytes:
    """
    Base64-decode text.

    Raises:
        ValueError: If text is not valid base64
    """
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 data: {e}") from e

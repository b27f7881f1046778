"""Minisign signature verification of registry packages."""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

REGISTRY_PUBLIC_KEY = "RWQf6LRCGA9i53mlYecO4IzT51TGPpvWucNSCh1CBM0QTaLn73Y7GFO3"

_KEY_ALGORITHM = b"Ed"
_SIG_ALGORITHM_LEGACY = b"Ed"
_SIG_ALGORITHM_PREHASHED = b"ED"
_TRUSTED_PREFIX = "trusted comment: "


class VerifyError(Exception):
    """Base class for signature verification failures."""


class InvalidPublicKeyError(VerifyError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid public key: {detail}")
        self.detail = detail


class InvalidSignatureError(VerifyError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid signature format: {detail}")
        self.detail = detail


class VerificationFailedError(VerifyError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Signature verification failed: {detail}")
        self.detail = detail


@dataclass(frozen=True)
class _Signature:
    algorithm: bytes
    key_id: bytes
    signature: bytes
    trusted_comment: str
    global_signature: bytes


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.strip(), validate=True)


def _decode_signature(text: str) -> _Signature:
    lines = text.splitlines()
    if len(lines) < 4:
        raise InvalidSignatureError("incomplete signature file")
    _untrusted, encoded_sig, trusted_line, encoded_global = lines[:4]
    try:
        sig_bin = _b64decode(encoded_sig)
        global_sig = _b64decode(encoded_global)
    except (binascii.Error, ValueError) as exc:
        raise InvalidSignatureError(f"invalid base64: {exc}") from exc
    if len(sig_bin) != 74:
        raise InvalidSignatureError("invalid signature length")
    if len(global_sig) != 64:
        raise InvalidSignatureError("invalid global signature length")
    if not trusted_line.startswith(_TRUSTED_PREFIX):
        raise InvalidSignatureError("unexpected format for the trusted comment")
    algorithm = sig_bin[:2]
    if algorithm not in (_SIG_ALGORITHM_LEGACY, _SIG_ALGORITHM_PREHASHED):
        raise InvalidSignatureError("unsupported signature algorithm")
    return _Signature(
        algorithm=algorithm,
        key_id=sig_bin[2:10],
        signature=sig_bin[10:],
        trusted_comment=trusted_line[len(_TRUSTED_PREFIX):],
        global_signature=global_sig,
    )


class Verifier:
    """Checks minisign signatures against a public key (the registry key by default)."""

    def __init__(self, public_key: str = REGISTRY_PUBLIC_KEY) -> None:
        try:
            raw = _b64decode(public_key)
        except (binascii.Error, ValueError) as exc:
            raise InvalidPublicKeyError(str(exc)) from exc
        if len(raw) != 42 or raw[:2] != _KEY_ALGORITHM:
            raise InvalidPublicKeyError("unsupported or malformed key")
        self._key_id = raw[2:10]
        self._verify_key = VerifyKey(raw[10:])

    def verify(self, content: bytes, signature: str) -> str:
        """Verify a prehashed minisign signature; return its trusted comment."""
        sig = _decode_signature(signature)
        if sig.key_id != self._key_id:
            raise VerificationFailedError("Incompatible key identifiers")
        if sig.algorithm == _SIG_ALGORITHM_LEGACY:
            raise VerificationFailedError("Legacy signatures are not accepted")
        digest = hashlib.blake2b(content, digest_size=64).digest()
        try:
            self._verify_key.verify(digest, sig.signature)
        except BadSignatureError as exc:
            raise VerificationFailedError("Signature verification failed") from exc
        try:
            self._verify_key.verify(
                sig.signature + sig.trusted_comment.encode("utf-8"),
                sig.global_signature,
            )
        except BadSignatureError as exc:
            raise VerificationFailedError("Comment signature verification failed") from exc
        return sig.trusted_comment

    def verify_with_hash(self, content: bytes, signature: str, expected_hash: str) -> str:
        """Verify the signature and the SHA-256 of the content; return the trusted comment."""
        trusted_comment = self.verify(content, signature)
        actual_hash = compute_sha256(content)
        if actual_hash != expected_hash:
            raise VerificationFailedError(
                f"Hash mismatch: expected {expected_hash}, got {actual_hash}"
            )
        return trusted_comment


def compute_sha256(data: bytes) -> str:
    """Lower-case hex SHA-256 digest of data."""
    return hashlib.sha256(data).hexdigest()
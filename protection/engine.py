"""
Protection Engine - encryption and decryption over an ordered provider chain.

Encrypt:
    Providers are tried in order; the first success wins. If every provider
    fails the request raises ``LibraryLimitation`` with each provider's
    reason.

Decrypt:
    The chain stops at the first success or at the first explicit
    authentication failure (``PasswordError``). ``unsupported`` and
    ``other_error`` escalate to the next provider. When every provider fails
    without rejecting the password, the input is treated as not encrypted
    and returned unchanged.
"""

from __future__ import annotations

import time
from typing import Optional, Sequence

import fitz  # PyMuPDF

from common.exceptions import InputError, LibraryLimitation, PasswordError
from common.logging_config import get_logger

from .models import ChainOutcome, FailureSignal, ProtectionRequest
from .providers import CapabilityProvider, default_providers

logger = get_logger(__name__)


def owner_password_for(password: str) -> str:
    """Owner password derived from the user password and the current epoch milliseconds."""
    return f"{password}_owner_{int(time.time() * 1000)}"


def is_encrypted_pdf(data: bytes) -> bool:
    """
    Raises:
        InputError: The bytes are not a readable PDF
    """
    if not data:
        raise InputError("Empty input: pdf document")
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise InputError("File is corrupted or unreadable: pdf document", details=str(exc)) from exc
    with doc:
        return bool(doc.needs_pass or doc.is_encrypted)


class ProtectionEngine:
    def __init__(self, providers: Optional[Sequence[CapabilityProvider]] = None):
        self.providers = list(providers) if providers is not None else default_providers()

    def encrypt(self, data: bytes, request: ProtectionRequest) -> ChainOutcome:
        """
        Raises:
            InputError: Unreadable or already encrypted input
            LibraryLimitation: No provider could encrypt
        """
        if is_encrypted_pdf(data):
            raise InputError("Document is already password-protected")

        owner_password = owner_password_for(request.password)
        attempts: list[tuple[str, str]] = []

        for provider in self.providers:
            outcome = provider.attempt_encrypt(data, request, owner_password)
            if outcome.ok:
                logger.info(
                    f"Encrypted with {provider.name} ({request.encryption_level.value}, "
                    f"printing={request.permissions.printing_tier.value})"
                )
                return ChainOutcome(data=outcome.data, provider=provider.name, was_encrypted=False)
            logger.warning(f"Provider {provider.name} could not encrypt ({outcome.signal.value}): {outcome.message}")
            attempts.append((provider.name, outcome.message or outcome.signal.value))

        raise LibraryLimitation(
            f"No available provider supports {request.encryption_level.value} encryption",
            attempts=attempts,
        )

    def decrypt(self, data: bytes, password: str) -> ChainOutcome:
        """
        Raises:
            PasswordError: A provider rejected the password
        """
        for provider in self.providers:
            outcome = provider.attempt_decrypt(data, password)
            if outcome.ok:
                logger.info(f"Decrypt handled by {provider.name} (was_encrypted={outcome.was_encrypted})")
                return ChainOutcome(
                    data=outcome.data,
                    provider=provider.name,
                    was_encrypted=outcome.was_encrypted,
                )
            if outcome.signal == FailureSignal.AUTH_FAILURE:
                raise PasswordError(provider=provider.name)
            logger.info(
                f"Provider {provider.name} could not decrypt ({outcome.signal.value}): "
                f"{outcome.message}; trying next provider"
            )

        logger.warning("No provider could decrypt; treating input as not password-protected")
        return ChainOutcome(data=data, provider=None, was_encrypted=False)

"""
Protection - PDF encryption and decryption through capability providers.

Providers are tried in order (PyMuPDF first, pypdf second). Encryption
fails with ``LibraryLimitation`` only when every provider fails; decryption
raises ``PasswordError`` only when a provider explicitly rejects the
password, and passes unencrypted input through unchanged.

Quick Start:
    from protection import ProtectionService

    service = ProtectionService()
    locked = service.protect(pdf_bytes, "secret", {"printing": False})
    unlocked = service.unlock(locked.data, "secret")
"""

__version__ = "1.0.0"

from .models import (
    EncryptionLevel,
    PrintingTier,
    FailureSignal,
    Permissions,
    ProtectionRequest,
    ProviderOutcome,
    ChainOutcome,
    ProtectResult,
    UnlockResult,
    resolve_printing_tier,
)
from .providers import CapabilityProvider, PyMuPDFProvider, PypdfProvider, default_providers
from .engine import ProtectionEngine, owner_password_for, is_encrypted_pdf
from .config import ProtectionServiceConfig
from .service import ProtectionService

__all__ = [
    "EncryptionLevel",
    "PrintingTier",
    "FailureSignal",
    "Permissions",
    "ProtectionRequest",
    "ProviderOutcome",
    "ChainOutcome",
    "ProtectResult",
    "UnlockResult",
    "resolve_printing_tier",
    "CapabilityProvider",
    "PyMuPDFProvider",
    "PypdfProvider",
    "default_providers",
    "ProtectionEngine",
    "owner_password_for",
    "is_encrypted_pdf",
    "ProtectionServiceConfig",
    "ProtectionService",
]

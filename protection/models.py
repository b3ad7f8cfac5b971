"""
Data Models for PDF Protection.

Defines the protection request (password, permissions, encryption level),
the tagged outcome every capability provider reports, and the operation
results.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from common.contract import OperationResult


# =============================================================================
# ENUMS
# =============================================================================


class EncryptionLevel(str, Enum):
    AES_128 = "128-bit"
    AES_256 = "256-bit"


class PrintingTier(str, Enum):
    NONE = "none"
    LOW_RESOLUTION = "low"
    HIGH_RESOLUTION = "high"


class FailureSignal(str, Enum):
    """
    Why a provider could not complete an attempt.

    AUTH_FAILURE: the password was explicitly rejected (stops the chain)
    UNSUPPORTED: the provider cannot handle this input or feature
    OTHER_ERROR: any other failure
    """

    AUTH_FAILURE = "auth_failure"
    UNSUPPORTED = "unsupported"
    OTHER_ERROR = "other_error"


# =============================================================================
# REQUEST
# =============================================================================


class Permissions(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    printing: bool = True
    high_res_printing: bool = True
    copying: bool = True
    modifying: bool = True
    annotating: bool = True
    filling_forms: bool = True
    content_extraction: bool = True
    document_assembly: bool = True

    @property
    def printing_tier(self) -> PrintingTier:
        return resolve_printing_tier(self)


def resolve_printing_tier(permissions: Permissions) -> PrintingTier:
    if not permissions.printing:
        return PrintingTier.NONE
    if not permissions.high_res_printing:
        return PrintingTier.LOW_RESOLUTION
    return PrintingTier.HIGH_RESOLUTION


class ProtectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(..., min_length=1, repr=False)
    permissions: Permissions = Field(default_factory=Permissions)
    encryption_level: EncryptionLevel = EncryptionLevel.AES_256


# =============================================================================
# PROVIDER OUTCOME
# =============================================================================


@dataclass(frozen=True)
class ProviderOutcome:
    """
    Result of one provider attempt: success with output bytes, or a failure
    signal with a message.
    """

    data: Optional[bytes] = None
    was_encrypted: bool = False
    signal: Optional[FailureSignal] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.signal is None

    @classmethod
    def success(cls, data: bytes, was_encrypted: bool = True) -> "ProviderOutcome":
        return cls(data=data, was_encrypted=was_encrypted)

    @classmethod
    def failure(cls, signal: FailureSignal, message: str) -> "ProviderOutcome":
        return cls(signal=signal, message=message)


@dataclass(frozen=True)
class ChainOutcome:
    """What the provider chain produced; ``provider`` is None for a pass-through."""

    data: bytes
    provider: Optional[str]
    was_encrypted: bool


# =============================================================================
# RESULTS
# =============================================================================


class ProtectResult(OperationResult):
    encrypted: bool = True
    encryption_level: EncryptionLevel = EncryptionLevel.AES_256
    permissions: Permissions = Field(default_factory=Permissions)
    provider: Optional[str] = None


class UnlockResult(OperationResult):
    encrypted: bool = False
    was_encrypted: bool = False
    provider: Optional[str] = None
    message: Optional[str] = None

"""
Capability providers for PDF encryption and decryption.

A provider attempts one operation and reports a ``ProviderOutcome``; it
never raises for an expected failure. Providers:

- ``PyMuPDFProvider``: native MuPDF encryption (AES-128/256) and
  authentication
- ``PypdfProvider``: pypdf ``PdfReader.decrypt`` / ``PdfWriter.encrypt``; AES
  needs the ``cryptography`` backend, and its absence reports ``unsupported``
"""

from __future__ import annotations

import io

import fitz  # PyMuPDF
from pypdf import PasswordType, PdfReader, PdfWriter
from pypdf.constants import UserAccessPermissions
from pypdf.errors import DependencyError

from .models import (
    EncryptionLevel,
    FailureSignal,
    Permissions,
    PrintingTier,
    ProtectionRequest,
    ProviderOutcome,
)


class CapabilityProvider:
    """
    Base provider. Subclasses override the operations they support; the
    defaults report ``unsupported``.
    """

    name = "base"

    def attempt_encrypt(
        self,
        data: bytes,
        request: ProtectionRequest,
        owner_password: str,
    ) -> ProviderOutcome:
        return ProviderOutcome.failure(FailureSignal.UNSUPPORTED, f"{self.name} cannot encrypt")

    def attempt_decrypt(self, data: bytes, password: str) -> ProviderOutcome:
        return ProviderOutcome.failure(FailureSignal.UNSUPPORTED, f"{self.name} cannot decrypt")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


# =============================================================================
# PYMUPDF
# =============================================================================


FITZ_ENCRYPTION = {
    EncryptionLevel.AES_128: fitz.PDF_ENCRYPT_AES_128,
    EncryptionLevel.AES_256: fitz.PDF_ENCRYPT_AES_256,
}


def fitz_permissions(permissions: Permissions) -> int:
    bits = 0
    tier = permissions.printing_tier
    if tier != PrintingTier.NONE:
        bits |= fitz.PDF_PERM_PRINT
    if tier == PrintingTier.HIGH_RESOLUTION:
        bits |= fitz.PDF_PERM_PRINT_HQ
    if permissions.copying:
        bits |= fitz.PDF_PERM_COPY
    if permissions.modifying:
        bits |= fitz.PDF_PERM_MODIFY
    if permissions.annotating:
        bits |= fitz.PDF_PERM_ANNOTATE
    if permissions.filling_forms:
        bits |= fitz.PDF_PERM_FORM
    if permissions.content_extraction:
        bits |= fitz.PDF_PERM_ACCESSIBILITY
    if permissions.document_assembly:
        bits |= fitz.PDF_PERM_ASSEMBLE
    return bits


class PyMuPDFProvider(CapabilityProvider):
    name = "pymupdf"

    def attempt_encrypt(
        self,
        data: bytes,
        request: ProtectionRequest,
        owner_password: str,
    ) -> ProviderOutcome:
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                output = doc.tobytes(
                    garbage=3,
                    deflate=True,
                    encryption=FITZ_ENCRYPTION[request.encryption_level],
                    owner_pw=owner_password,
                    user_pw=request.password,
                    permissions=fitz_permissions(request.permissions),
                )
        except Exception as exc:
            return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))
        return ProviderOutcome.success(output)

    def attempt_decrypt(self, data: bytes, password: str) -> ProviderOutcome:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))

        with doc:
            was_encrypted = bool(doc.needs_pass or doc.is_encrypted)
            if not was_encrypted:
                return ProviderOutcome.success(data, was_encrypted=False)
            if doc.needs_pass and not doc.authenticate(password):
                return ProviderOutcome.failure(FailureSignal.AUTH_FAILURE, "Password rejected")
            try:
                output = doc.tobytes(garbage=3, deflate=True, encryption=fitz.PDF_ENCRYPT_NONE)
            except Exception as exc:
                return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))
        return ProviderOutcome.success(output)


# =============================================================================
# PYPDF
# =============================================================================


PYPDF_ALGORITHMS = {
    EncryptionLevel.AES_128: "AES-128",
    EncryptionLevel.AES_256: "AES-256",
}


def pypdf_permissions(permissions: Permissions) -> UserAccessPermissions:
    flags = UserAccessPermissions.all()
    tier = permissions.printing_tier
    if tier == PrintingTier.NONE:
        flags &= ~(UserAccessPermissions.PRINT | UserAccessPermissions.PRINT_TO_REPRESENTATION)
    elif tier == PrintingTier.LOW_RESOLUTION:
        flags &= ~UserAccessPermissions.PRINT_TO_REPRESENTATION
    denied = [
        (permissions.copying, UserAccessPermissions.EXTRACT),
        (permissions.modifying, UserAccessPermissions.MODIFY),
        (permissions.annotating, UserAccessPermissions.ADD_OR_MODIFY),
        (permissions.filling_forms, UserAccessPermissions.FILL_FORM_FIELDS),
        (permissions.content_extraction, UserAccessPermissions.EXTRACT_TEXT_AND_GRAPHICS),
        (permissions.document_assembly, UserAccessPermissions.ASSEMBLE_DOC),
    ]
    for allowed, flag in denied:
        if not allowed:
            flags &= ~flag
    return flags


class PypdfProvider(CapabilityProvider):
    name = "pypdf"

    def attempt_encrypt(
        self,
        data: bytes,
        request: ProtectionRequest,
        owner_password: str,
    ) -> ProviderOutcome:
        try:
            reader = PdfReader(io.BytesIO(data))
            writer = PdfWriter(clone_from=reader)
            writer.encrypt(
                user_password=request.password,
                owner_password=owner_password,
                permissions_flag=pypdf_permissions(request.permissions),
                algorithm=PYPDF_ALGORITHMS[request.encryption_level],
            )
            buffer = io.BytesIO()
            writer.write(buffer)
        except (DependencyError, NotImplementedError) as exc:
            return ProviderOutcome.failure(FailureSignal.UNSUPPORTED, str(exc))
        except Exception as exc:
            return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))
        return ProviderOutcome.success(buffer.getvalue())

    def attempt_decrypt(self, data: bytes, password: str) -> ProviderOutcome:
        try:
            reader = PdfReader(io.BytesIO(data))
        except Exception as exc:
            return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))

        if not reader.is_encrypted:
            return ProviderOutcome.success(data, was_encrypted=False)

        try:
            result = reader.decrypt(password)
        except (DependencyError, NotImplementedError) as exc:
            return ProviderOutcome.failure(FailureSignal.UNSUPPORTED, str(exc))
        except Exception as exc:
            return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))

        if result == PasswordType.NOT_DECRYPTED:
            return ProviderOutcome.failure(FailureSignal.AUTH_FAILURE, "Password rejected")

        try:
            writer = PdfWriter(clone_from=reader)
            buffer = io.BytesIO()
            writer.write(buffer)
        except Exception as exc:
            return ProviderOutcome.failure(FailureSignal.OTHER_ERROR, str(exc))
        return ProviderOutcome.success(buffer.getvalue())


def default_providers() -> list[CapabilityProvider]:
    return [PyMuPDFProvider(), PypdfProvider()]

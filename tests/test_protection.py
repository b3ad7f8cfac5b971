"""
Tests for PDF protection.

Tests cover:
- Provider chain semantics (fake providers)
- Real encrypt/decrypt round trips through PyMuPDF and pypdf
- Permission mapping for both libraries
- ProtectionService results
"""

from unittest.mock import Mock

import fitz  # PyMuPDF
import pytest
from pypdf.constants import UserAccessPermissions

from common.exceptions import InputError, LibraryLimitation, PasswordError
from protection import (
    EncryptionLevel,
    FailureSignal,
    Permissions,
    PrintingTier,
    ProtectionEngine,
    ProtectionRequest,
    ProtectionService,
    ProviderOutcome,
    PyMuPDFProvider,
    PypdfProvider,
)
from protection.engine import is_encrypted_pdf, owner_password_for
from protection.providers import fitz_permissions, pypdf_permissions
from protection.service import NOT_PROTECTED_MESSAGE


def fake_provider(name, encrypt=None, decrypt=None):
    provider = Mock()
    provider.name = name
    if encrypt is not None:
        provider.attempt_encrypt.return_value = encrypt
    if decrypt is not None:
        provider.attempt_decrypt.return_value = decrypt
    return provider


def unsupported(message="not available"):
    return ProviderOutcome.failure(FailureSignal.UNSUPPORTED, message)


def is_locked(data):
    with fitz.open(stream=data, filetype="pdf") as doc:
        return bool(doc.needs_pass)


@pytest.fixture
def request_256():
    return ProtectionRequest(password="pw")


# =============================================================================
# PROVIDER CHAIN
# =============================================================================


class TestEncryptChain:
    """Tests for encrypt escalation."""

    def test_first_success_wins(self, plain_pdf, request_256):
        first = fake_provider("first", encrypt=ProviderOutcome.success(b"first-output"))
        second = fake_provider("second", encrypt=ProviderOutcome.success(b"second-output"))

        outcome = ProtectionEngine([first, second]).encrypt(plain_pdf, request_256)

        assert outcome.data == b"first-output"
        assert outcome.provider == "first"
        second.attempt_encrypt.assert_not_called()

    def test_escalates_on_failure(self, plain_pdf, request_256):
        first = fake_provider("first", encrypt=unsupported())
        second = fake_provider("second", encrypt=ProviderOutcome.success(b"second-output"))

        outcome = ProtectionEngine([first, second]).encrypt(plain_pdf, request_256)

        assert outcome.provider == "second"

    def test_every_provider_fails(self, plain_pdf, request_256):
        first = fake_provider("first", encrypt=unsupported("no AES"))
        second = fake_provider(
            "second",
            encrypt=ProviderOutcome.failure(FailureSignal.OTHER_ERROR, "crashed"),
        )

        with pytest.raises(LibraryLimitation) as exc_info:
            ProtectionEngine([first, second]).encrypt(plain_pdf, request_256)

        assert exc_info.value.attempts == [("first", "no AES"), ("second", "crashed")]
        assert exc_info.value.kind == "library_limitation"

    def test_owner_password_passed_to_provider(self, plain_pdf, request_256):
        provider = fake_provider("only", encrypt=ProviderOutcome.success(b"x"))
        ProtectionEngine([provider]).encrypt(plain_pdf, request_256)

        owner_password = provider.attempt_encrypt.call_args.args[2]
        assert owner_password.startswith("pw_owner_")
        assert owner_password != "pw"

    def test_already_encrypted(self, encrypted_pdf, request_256):
        provider = fake_provider("only", encrypt=ProviderOutcome.success(b"x"))
        with pytest.raises(InputError):
            ProtectionEngine([provider]).encrypt(encrypted_pdf, request_256)
        provider.attempt_encrypt.assert_not_called()


class TestDecryptChain:
    """Tests for decrypt escalation."""

    def test_auth_failure_stops_chain(self, encrypted_pdf):
        first = fake_provider(
            "first",
            decrypt=ProviderOutcome.failure(FailureSignal.AUTH_FAILURE, "rejected"),
        )
        second = fake_provider("second", decrypt=ProviderOutcome.success(b"plain"))

        with pytest.raises(PasswordError) as exc_info:
            ProtectionEngine([first, second]).decrypt(encrypted_pdf, "wrong")

        assert exc_info.value.provider == "first"
        second.attempt_decrypt.assert_not_called()

    def test_escalates_past_unsupported(self, encrypted_pdf):
        first = fake_provider("first", decrypt=unsupported())
        second = fake_provider("second", decrypt=ProviderOutcome.success(b"plain"))

        outcome = ProtectionEngine([first, second]).decrypt(encrypted_pdf, "secret")

        assert outcome.data == b"plain"
        assert outcome.provider == "second"
        assert outcome.was_encrypted is True

    def test_all_fail_passes_input_through(self, encrypted_pdf):
        providers = [
            fake_provider("first", decrypt=unsupported()),
            fake_provider("second", decrypt=ProviderOutcome.failure(FailureSignal.OTHER_ERROR, "boom")),
        ]

        outcome = ProtectionEngine(providers).decrypt(encrypted_pdf, "secret")

        assert outcome.data == encrypted_pdf
        assert outcome.provider is None
        assert outcome.was_encrypted is False


# =============================================================================
# REAL PROVIDERS
# =============================================================================


class TestPyMuPDFProvider:
    def test_encrypt_and_decrypt(self, plain_pdf, request_256):
        provider = PyMuPDFProvider()

        locked = provider.attempt_encrypt(plain_pdf, request_256, owner_password_for("pw"))
        assert locked.ok
        assert is_locked(locked.data)

        unlocked = provider.attempt_decrypt(locked.data, "pw")
        assert unlocked.ok
        assert unlocked.was_encrypted is True
        assert not is_locked(unlocked.data)

    def test_wrong_password(self, encrypted_pdf):
        outcome = PyMuPDFProvider().attempt_decrypt(encrypted_pdf, "wrong")
        assert outcome.signal == FailureSignal.AUTH_FAILURE

    def test_plain_document_unchanged(self, plain_pdf):
        outcome = PyMuPDFProvider().attempt_decrypt(plain_pdf, "anything")
        assert outcome.ok
        assert outcome.data == plain_pdf
        assert outcome.was_encrypted is False

    def test_unreadable(self):
        outcome = PyMuPDFProvider().attempt_decrypt(b"garbage", "pw")
        assert outcome.signal == FailureSignal.OTHER_ERROR


class TestPypdfProvider:
    def test_encrypt(self, plain_pdf):
        request = ProtectionRequest(password="pw", encryption_level=EncryptionLevel.AES_128)
        outcome = PypdfProvider().attempt_encrypt(plain_pdf, request, "owner")

        assert outcome.ok
        with fitz.open(stream=outcome.data, filetype="pdf") as doc:
            assert doc.needs_pass
            assert doc.authenticate("pw")
            assert "Hello world" in doc[0].get_text()

    def test_decrypt(self, encrypted_pdf):
        outcome = PypdfProvider().attempt_decrypt(encrypted_pdf, "secret")
        assert outcome.ok
        assert not is_locked(outcome.data)

    def test_wrong_password(self, encrypted_pdf):
        outcome = PypdfProvider().attempt_decrypt(encrypted_pdf, "wrong")
        assert outcome.signal == FailureSignal.AUTH_FAILURE

    def test_plain_document_unchanged(self, plain_pdf):
        outcome = PypdfProvider().attempt_decrypt(plain_pdf, "pw")
        assert outcome.data == plain_pdf
        assert outcome.was_encrypted is False


# =============================================================================
# PERMISSIONS
# =============================================================================


class TestPermissions:
    """Tests for permission mapping."""

    @pytest.mark.parametrize(
        "printing, high_res, tier",
        [
            (True, True, PrintingTier.HIGH_RESOLUTION),
            (True, False, PrintingTier.LOW_RESOLUTION),
            (False, True, PrintingTier.NONE),
            (False, False, PrintingTier.NONE),
        ],
    )
    def test_printing_tier(self, printing, high_res, tier):
        permissions = Permissions(printing=printing, high_res_printing=high_res)
        assert permissions.printing_tier == tier

    def test_camel_case_input(self):
        permissions = Permissions.model_validate({"highResPrinting": False, "fillingForms": False})
        assert permissions.high_res_printing is False
        assert permissions.filling_forms is False

    def test_fitz_all_allowed(self):
        bits = fitz_permissions(Permissions())
        for flag in (fitz.PDF_PERM_PRINT, fitz.PDF_PERM_PRINT_HQ, fitz.PDF_PERM_COPY, fitz.PDF_PERM_MODIFY):
            assert bits & flag

    def test_fitz_low_resolution(self):
        bits = fitz_permissions(Permissions(high_res_printing=False, copying=False))
        assert bits & fitz.PDF_PERM_PRINT
        assert not bits & fitz.PDF_PERM_PRINT_HQ
        assert not bits & fitz.PDF_PERM_COPY

    def test_fitz_no_printing(self):
        bits = fitz_permissions(Permissions(printing=False))
        assert not bits & fitz.PDF_PERM_PRINT
        assert not bits & fitz.PDF_PERM_PRINT_HQ

    def test_pypdf_flags(self):
        flags = pypdf_permissions(Permissions(high_res_printing=False, modifying=False))
        assert flags & UserAccessPermissions.PRINT
        assert not flags & UserAccessPermissions.PRINT_TO_REPRESENTATION
        assert not flags & UserAccessPermissions.MODIFY
        assert flags & UserAccessPermissions.EXTRACT

    def test_pypdf_no_printing(self):
        flags = pypdf_permissions(Permissions(printing=False))
        assert not flags & UserAccessPermissions.PRINT

    def test_permissions_written(self, plain_pdf):
        service = ProtectionService(engine=ProtectionEngine([PyMuPDFProvider()]))
        result = service.protect(plain_pdf, "pw", permissions={"printing": False, "copying": False})
        with fitz.open(stream=result.data, filetype="pdf") as doc:
            doc.authenticate("pw")
            assert not doc.permissions & fitz.PDF_PERM_PRINT
            assert not doc.permissions & fitz.PDF_PERM_COPY
            assert doc.permissions & fitz.PDF_PERM_MODIFY


# =============================================================================
# SERVICE
# =============================================================================


class TestProtectionService:
    """Tests for protect/unlock results."""

    def test_protect_then_unlock(self, plain_pdf):
        service = ProtectionService()

        protected = service.protect(plain_pdf, "pw", filename="report.pdf")
        assert protected.filename == "report_protected.pdf"
        assert protected.encrypted is True
        assert protected.encryption_level == EncryptionLevel.AES_256
        assert protected.provider == "pymupdf"
        assert is_encrypted_pdf(protected.data)

        unlocked = service.unlock(protected.data, "pw", filename="report_protected.pdf")
        assert unlocked.filename == "report_protected_unlocked.pdf"
        assert unlocked.was_encrypted is True
        assert unlocked.message is None
        with fitz.open(stream=unlocked.data, filetype="pdf") as doc:
            assert not doc.needs_pass
            assert "Hello world" in doc[0].get_text()

    def test_unlock_wrong_password(self, encrypted_pdf):
        with pytest.raises(PasswordError):
            ProtectionService().unlock(encrypted_pdf, "wrong")

    def test_unlock_plain_is_idempotent(self, plain_pdf):
        result = ProtectionService().unlock(plain_pdf, "pw")
        assert result.data == plain_pdf
        assert result.was_encrypted is False
        assert result.message == NOT_PROTECTED_MESSAGE

    def test_protect_already_protected(self, encrypted_pdf):
        with pytest.raises(InputError):
            ProtectionService().protect(encrypted_pdf, "pw")

    def test_empty_password(self, plain_pdf):
        with pytest.raises(InputError):
            ProtectionService().protect(plain_pdf, "")

    def test_unknown_level(self, plain_pdf):
        with pytest.raises(InputError):
            ProtectionService().protect(plain_pdf, "pw", encryption_level="512-bit")

    def test_aes_128(self, plain_pdf):
        result = ProtectionService().protect(plain_pdf, "pw", encryption_level="128-bit")
        assert result.encryption_level == EncryptionLevel.AES_128
        assert is_encrypted_pdf(result.data)

    def test_contract(self, plain_pdf):
        contract = ProtectionService().protect(plain_pdf, "pw", output_name="locked.pdf").to_contract()
        assert contract["filename"] == "locked.pdf"
        assert contract["encryptionLevel"] == "256-bit"
        assert contract["permissions"]["highResPrinting"] is True
        assert "password" not in str(contract)

    def test_garbage(self):
        with pytest.raises(InputError):
            ProtectionService().protect(b"garbage", "pw")

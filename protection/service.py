from pathlib import Path
from typing import Any, Mapping, Optional, Union

from common.options import build_options
from common.pdf_utils import PDF_MIME_TYPE, strip_extension
from common.storage import LocalStorage, StorageGateway, build_storage_path

from .config import ProtectionServiceConfig
from .engine import ProtectionEngine
from .models import Permissions, ProtectionRequest, ProtectResult, UnlockResult

NOT_PROTECTED_MESSAGE = "PDF was not password-protected"


class ProtectionService:
    def __init__(
        self,
        config: ProtectionServiceConfig | None = None,
        storage: StorageGateway | None = None,
        engine: ProtectionEngine | None = None,
    ):
        self.config = config or ProtectionServiceConfig()
        self.storage = storage or LocalStorage(self.config.data_dir)
        self.engine = engine or ProtectionEngine()

    def protect(
        self,
        data: bytes,
        password: str,
        permissions: Optional[Union[Permissions, Mapping[str, Any]]] = None,
        encryption_level: str = "256-bit",
        filename: str = "document.pdf",
        output_name: Optional[str] = None,
    ) -> ProtectResult:
        request = build_options(
            ProtectionRequest,
            {
                "password": password,
                "permissions": permissions if permissions is not None else {},
                "encryption_level": encryption_level,
            },
        )
        outcome = self.engine.encrypt(data, request)
        return ProtectResult(
            filename=output_name or f"{strip_extension(filename)}_protected.pdf",
            size=len(outcome.data),
            data=outcome.data,
            encrypted=True,
            encryption_level=request.encryption_level,
            permissions=request.permissions,
            provider=outcome.provider,
        )

    def unlock(
        self,
        data: bytes,
        password: str,
        filename: str = "document.pdf",
        output_name: Optional[str] = None,
    ) -> UnlockResult:
        outcome = self.engine.decrypt(data, password)
        return UnlockResult(
            filename=output_name or f"{strip_extension(filename)}_unlocked.pdf",
            size=len(outcome.data),
            data=outcome.data,
            encrypted=False,
            was_encrypted=outcome.was_encrypted,
            provider=outcome.provider,
            message=None if outcome.was_encrypted else NOT_PROTECTED_MESSAGE,
        )

    def protect_from_storage(
        self,
        path: str,
        password: str,
        permissions: Optional[Union[Permissions, Mapping[str, Any]]] = None,
        encryption_level: str = "256-bit",
        output_name: Optional[str] = None,
    ) -> ProtectResult:
        result = self.protect(
            self.storage.read(path),
            password,
            permissions=permissions,
            encryption_level=encryption_level,
            filename=Path(path).name,
            output_name=output_name,
        )
        output_path = build_storage_path(self.config.protected_prefix, result.filename)
        self.storage.write(output_path, result.data, PDF_MIME_TYPE)
        return result.model_copy(update={"path": output_path})

    def unlock_from_storage(
        self,
        path: str,
        password: str,
        output_name: Optional[str] = None,
    ) -> UnlockResult:
        result = self.unlock(self.storage.read(path), password, Path(path).name, output_name)
        output_path = build_storage_path(self.config.unlocked_prefix, result.filename)
        self.storage.write(output_path, result.data, PDF_MIME_TYPE)
        return result.model_copy(update={"path": output_path})

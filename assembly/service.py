from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from common.options import build_options
from common.pdf_utils import PDF_MIME_TYPE
from common.storage import LocalStorage, StorageGateway, build_storage_path

from .analyzer import analyze_document
from .compressor import compress_document
from .config import AssemblyServiceConfig
from .images import images_to_pdf
from .merger import merge_documents
from .models import (
    CompressOptions,
    CompressResult,
    ImagesToPdfOptions,
    ImagesToPdfResult,
    MergeOptions,
    MergeResult,
    PDFAnalysis,
    SourceDocument,
    SplitOptions,
    SplitResult,
)
from .splitter import split_document


class AssemblyService:
    def __init__(
        self,
        config: AssemblyServiceConfig | None = None,
        storage: StorageGateway | None = None,
    ):
        self.config = config or AssemblyServiceConfig()
        self.storage = storage or LocalStorage(self.config.data_dir)

    # Byte-buffer mode

    def merge(
        self,
        sources: Sequence[SourceDocument],
        options: Optional[Union[MergeOptions, Mapping[str, Any]]] = None,
    ) -> MergeResult:
        return merge_documents(sources, build_options(MergeOptions, options))

    def split(
        self,
        data: bytes,
        filename: str = "document.pdf",
        options: Optional[Union[SplitOptions, Mapping[str, Any]]] = None,
    ) -> SplitResult:
        return split_document(data, filename, build_options(SplitOptions, options))

    def compress(
        self,
        data: bytes,
        options: Optional[Union[CompressOptions, Mapping[str, Any]]] = None,
    ) -> CompressResult:
        return compress_document(data, build_options(CompressOptions, options))

    def images_to_pdf(
        self,
        images: Sequence[SourceDocument],
        options: Optional[Union[ImagesToPdfOptions, Mapping[str, Any]]] = None,
    ) -> ImagesToPdfResult:
        return images_to_pdf(images, build_options(ImagesToPdfOptions, options))

    def analyze(self, data: bytes, password: Optional[str] = None, name: Optional[str] = None) -> PDFAnalysis:
        return analyze_document(data, password=password, name=name)

    # From-storage mode

    def _load(self, paths: Sequence[str]) -> list[SourceDocument]:
        return [SourceDocument(filename=Path(p).name, data=self.storage.read(p)) for p in paths]

    def merge_from_storage(
        self,
        paths: Sequence[str],
        options: Optional[Union[MergeOptions, Mapping[str, Any]]] = None,
    ) -> MergeResult:
        result = self.merge(self._load(paths), options)
        output_path = build_storage_path(self.config.merged_prefix, result.filename)
        self.storage.write(output_path, result.data, PDF_MIME_TYPE)
        return result.model_copy(update={"path": output_path})

    def split_from_storage(
        self,
        path: str,
        options: Optional[Union[SplitOptions, Mapping[str, Any]]] = None,
    ) -> SplitResult:
        result = self.split(self.storage.read(path), Path(path).name, options)
        fragments = []
        for fragment in result.files:
            output_path = build_storage_path(self.config.split_prefix, fragment.filename)
            self.storage.write(output_path, fragment.data, PDF_MIME_TYPE)
            fragments.append(fragment.model_copy(update={"path": output_path}))
        return result.model_copy(update={"files": fragments})

    def compress_from_storage(
        self,
        path: str,
        options: Optional[Union[CompressOptions, Mapping[str, Any]]] = None,
    ) -> CompressResult:
        result = self.compress(self.storage.read(path), options)
        output_path = build_storage_path(self.config.compressed_prefix, result.filename)
        self.storage.write(output_path, result.data, PDF_MIME_TYPE)
        return result.model_copy(update={"path": output_path})

    def images_to_pdf_from_storage(
        self,
        paths: Sequence[str],
        options: Optional[Union[ImagesToPdfOptions, Mapping[str, Any]]] = None,
    ) -> ImagesToPdfResult:
        result = self.images_to_pdf(self._load(paths), options)
        output_path = build_storage_path(self.config.images_prefix, result.filename)
        self.storage.write(output_path, result.data, PDF_MIME_TYPE)
        return result.model_copy(update={"path": output_path})

    def analyze_from_storage(self, path: str, password: Optional[str] = None) -> PDFAnalysis:
        return self.analyze(self.storage.read(path), password=password, name=Path(path).name)

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from common.logging_config import get_logger
from common.options import build_options
from common.pdf_utils import PDF_MIME_TYPE, open_pdf, strip_extension
from common.storage import LocalStorage, StorageGateway, build_storage_path

from .config import ConversionServiceConfig
from .extractor import ContentExtractor
from .models import (
    ConversionOptions,
    ConversionResult,
    PdfConversionResult,
    StructuredDocument,
    TargetKind,
)
from .office_reader import read_source, resolve_source_format
from .pdf_writer import render_pdf
from .serializers import get_serializer, serialize

logger = get_logger(__name__)

OptionsArg = Optional[Union[ConversionOptions, Mapping[str, Any]]]


class ConversionService:
    def __init__(
        self,
        config: ConversionServiceConfig | None = None,
        storage: StorageGateway | None = None,
        extractor: ContentExtractor | None = None,
    ):
        self.config = config or ConversionServiceConfig()
        self.storage = storage or LocalStorage(self.config.data_dir)
        self.extractor = extractor or ContentExtractor()

    def _options(self, options: OptionsArg) -> ConversionOptions:
        if options is None:
            return self.config.options
        return build_options(ConversionOptions, options)

    def extract(
        self,
        data: bytes,
        format_hint: str,
        options: OptionsArg = None,
    ) -> StructuredDocument:
        opts = self._options(options)
        return self.extractor.extract(data, format_hint, page_range=opts.page_range, options=opts)

    def convert(
        self,
        data: bytes,
        format_hint: str,
        target: Union[TargetKind, str],
        filename: str = "document",
        options: OptionsArg = None,
    ) -> ConversionResult:
        serializer = get_serializer(target)
        opts = self._options(options)

        document = self.extractor.extract(data, format_hint, page_range=opts.page_range, options=opts)
        output = serialize(document, serializer.target, opts)

        result = ConversionResult(
            filename=f"{strip_extension(filename)}.{serializer.extension}",
            size=len(output),
            data=output,
            format=serializer.target,
            mime_type=serializer.mime_type,
            page_count=document.page_count,
            degraded=document.degraded,
            page_mapping=document.page_mapping,
        )
        logger.info(f"Converted {filename} to {result.filename} ({result.size} bytes)")
        return result

    def convert_from_storage(
        self,
        path: str,
        target: Union[TargetKind, str],
        options: OptionsArg = None,
    ) -> ConversionResult:
        data = self.storage.read(path)
        filename = Path(path).name
        result = self.convert(data, filename, target, filename=filename, options=options)

        output_path = build_storage_path(self.config.output_prefix, result.filename)
        self.storage.write(output_path, result.data, result.mime_type)
        return result.model_copy(update={"path": output_path})

    def to_pdf(
        self,
        data: bytes,
        format_hint: str,
        filename: str = "document",
        options: OptionsArg = None,
    ) -> PdfConversionResult:
        """
        Lay out a DOCX, XLSX, CSV, PPTX or TXT document as PDF.

        Raises:
            InputError: Unsupported format or unreadable bytes
            SerializationError: If the PDF could not be written
        """
        source_format = resolve_source_format(format_hint)
        opts = self._options(options)

        document = read_source(data, source_format, filename=filename)
        output = render_pdf(document, opts)
        with open_pdf(output) as doc:
            page_count = doc.page_count

        result = PdfConversionResult(
            filename=f"{strip_extension(filename)}.pdf",
            size=len(output),
            data=output,
            source_format=source_format,
            page_count=page_count,
        )
        logger.info(f"Converted {filename} to {result.filename} ({page_count} pages)")
        return result

    def to_pdf_from_storage(self, path: str, options: OptionsArg = None) -> PdfConversionResult:
        data = self.storage.read(path)
        filename = Path(path).name
        result = self.to_pdf(data, filename, filename=filename, options=options)

        output_path = build_storage_path(self.config.output_prefix, result.filename)
        self.storage.write(output_path, result.data, PDF_MIME_TYPE)
        return result.model_copy(update={"path": output_path})

"""
Images to PDF.

Each decodable image becomes one page. Page size comes from the options
(standard sizes or custom), orientation can follow the image, and images
are scaled into the margins and optionally centred. Images that cannot be
decoded are skipped and reported in the result.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import fitz  # PyMuPDF

from common.exceptions import InputError
from common.logging_config import get_logger
from common.pdf_utils import strip_extension

from .models import (
    ImagesToPdfOptions,
    ImagesToPdfResult,
    PageOrientation,
    PageSize,
    SourceDocument,
)

logger = get_logger(__name__)

# Points (1/72 inch), portrait
PAGE_SIZES = {
    PageSize.A4: (595.28, 841.89),
    PageSize.A3: (841.89, 1190.55),
    PageSize.A5: (419.53, 595.28),
    PageSize.LETTER: (612.0, 792.0),
    PageSize.LEGAL: (612.0, 1008.0),
}

GREY = (0.5, 0.5, 0.5)


def hex_to_rgb(color: str) -> tuple[float, float, float]:
    digits = color.lstrip("#")
    return tuple(int(digits[i:i + 2], 16) / 255 for i in (0, 2, 4))  # type: ignore[return-value]


def page_dimensions(
    options: ImagesToPdfOptions,
    image_width: float,
    image_height: float,
) -> tuple[float, float]:
    if options.page_size == PageSize.CUSTOM:
        width, height = options.custom_width, options.custom_height
    else:
        width, height = PAGE_SIZES[options.page_size]

    if options.orientation == PageOrientation.AUTO:
        if image_width > image_height and width < height:
            width, height = height, width
    elif options.orientation == PageOrientation.LANDSCAPE:
        width, height = max(width, height), min(width, height)
    else:
        width, height = min(width, height), max(width, height)
    return width, height


def image_rect(
    options: ImagesToPdfOptions,
    page_width: float,
    page_height: float,
    image_width: float,
    image_height: float,
) -> fitz.Rect:
    margin = options.margin
    width, height = image_width, image_height
    if options.fit_to_page:
        available_width = max(page_width - 2 * margin, 1)
        available_height = max(page_height - 2 * margin, 1)
        scale = min(available_width / width, available_height / height)
        width, height = width * scale, height * scale

    if options.center_images:
        x0, y0 = (page_width - width) / 2, (page_height - height) / 2
    else:
        x0, y0 = margin, margin
    return fitz.Rect(x0, y0, x0 + width, y0 + height)


def images_to_pdf(
    images: Sequence[SourceDocument],
    options: Optional[ImagesToPdfOptions] = None,
) -> ImagesToPdfResult:
    """
    Raises:
        InputError: No image could be decoded
    """
    options = options or ImagesToPdfOptions()
    background = hex_to_rgb(options.background_color)
    skipped: list[str] = []

    with fitz.open() as doc:
        for image in images:
            try:
                pixmap = fitz.Pixmap(image.data)
            except Exception as exc:
                logger.warning(f"Skipping {image.filename}: not a decodable image ({exc})")
                skipped.append(image.filename)
                continue
            if pixmap.width < 1 or pixmap.height < 1:
                skipped.append(image.filename)
                continue

            width, height = page_dimensions(options, pixmap.width, pixmap.height)
            page = doc.new_page(width=width, height=height)
            if options.background_color != "#FFFFFF":
                page.draw_rect(page.rect, color=None, fill=background)

            rect = image_rect(options, width, height, pixmap.width, pixmap.height)
            page.insert_image(rect, stream=image.data, keep_proportion=False)

            if options.add_page_numbers:
                page.insert_text(
                    (width - 50, height - 30), str(doc.page_count), fontsize=10, color=GREY
                )
            if options.add_timestamp:
                page.insert_text(
                    (50, height - 30),
                    datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                    fontsize=8,
                    color=GREY,
                )

        if doc.page_count == 0:
            raise InputError(
                "No images could be processed",
                details=", ".join(skipped) or "no images given",
            )

        doc.set_metadata({"title": strip_extension(options.output_name), "creator": "doc-engine"})
        page_count = doc.page_count
        data = doc.tobytes(garbage=3, deflate=True)

    logger.info(f"Built {options.output_name} from {page_count} images ({len(skipped)} skipped)")
    return ImagesToPdfResult(
        filename=options.output_name,
        size=len(data),
        data=data,
        page_count=page_count,
        skipped=skipped,
    )

from pathlib import Path
from typing import Optional, Union

from .client import ExtractionClient
from .config import ExtractionConfig
from .extractor import extract_cause_list
from .profiles import CauseListProfile, NCLT
from .schemas import ExtractionResult


SUPPORTED_SUFFIXES = (".pdf",)


def _build_converter():
    """Docling converter for digital cause list PDFs (text layer, no OCR)."""
    from docling.document_converter import DocumentConverter, PdfFormatOption
    from docling.datamodel.pipeline_options import PdfPipelineOptions
    from docling.datamodel.base_models import InputFormat

    pipeline_options = PdfPipelineOptions()
    pipeline_options.do_ocr = False  # Cause lists are published as digital PDFs
    pipeline_options.do_table_structure = True  # Serial/case columns come from tables

    return DocumentConverter(
        format_options={
            InputFormat.PDF: PdfFormatOption(pipeline_options=pipeline_options)
        }
    )


def convert_to_text(file_path: Union[str, Path]) -> str:
    """Convert a cause list PDF to plain text for extraction."""
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Document not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file format: {suffix}. Use PDF.")

    converter = _build_converter()
    result = converter.convert(str(path))

    # Markdown keeps table rows on their own lines, which the chunker relies on
    return result.document.export_to_markdown()


def extract_cause_list_from_file(
    file_path: Union[str, Path],
    profile: Union[CauseListProfile, str] = NCLT,
    client: Optional[ExtractionClient] = None,
    config: Optional[ExtractionConfig] = None,
) -> ExtractionResult:
    """Convert a PDF and extract its cause list."""
    text = convert_to_text(file_path)
    return extract_cause_list(text, profile=profile, client=client, config=config)

"""Structured extraction of Indian court cause lists with an LLM."""

from .chunking import estimate_tokens, split_into_chunks
from .client import (
    ExtractionClient,
    FallbackExtractionClient,
    OpenAIExtractionClient,
    build_default_client,
)
from .config import ExtractionConfig, ModelConfig, get_default_config
from .errors import ExtractionError, ParseFailure, RateLimitError, TransportError
from .extractor import aextract_cause_list, extract_cause_list
from .merger import group_merge_key, merge_results
from .parser import convert_to_text, extract_cause_list_from_file
from .pipeline import ExtractionOrchestrator, PipelineMetrics
from .profiles import NCLT, SUPREME_COURT, CauseListProfile, get_profile
from .prompts import build_request
from .records import CauseListRecord, flatten_result, to_payload
from .sanitizer import sanitize_response
from .schemas import Chunk, Entry, ExtractionRequest, ExtractionResult, Group

__all__ = [
    "CauseListProfile",
    "CauseListRecord",
    "Chunk",
    "Entry",
    "ExtractionClient",
    "ExtractionConfig",
    "ExtractionError",
    "ExtractionOrchestrator",
    "ExtractionRequest",
    "ExtractionResult",
    "FallbackExtractionClient",
    "Group",
    "ModelConfig",
    "NCLT",
    "OpenAIExtractionClient",
    "ParseFailure",
    "PipelineMetrics",
    "RateLimitError",
    "SUPREME_COURT",
    "TransportError",
    "aextract_cause_list",
    "build_default_client",
    "build_request",
    "convert_to_text",
    "estimate_tokens",
    "extract_cause_list",
    "extract_cause_list_from_file",
    "flatten_result",
    "get_default_config",
    "get_profile",
    "group_merge_key",
    "merge_results",
    "sanitize_response",
    "split_into_chunks",
    "to_payload",
]

"""Extraction pipeline orchestration."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .chunking import estimate_tokens, should_chunk, split_into_chunks
from .client import ExtractionClient
from .config import ExtractionConfig, DEFAULT_CONFIG
from .errors import RateLimitError, TransportError
from .merger import merge_results
from .outcome import ChunkOutcome
from .profiles import CauseListProfile, NCLT
from .prompts import build_request
from .sanitizer import fallback_result, sanitize_response
from .schemas import Chunk, ExtractionResult, PromptVariant

logger = logging.getLogger(__name__)


@dataclass
class PipelineMetrics:
    """Metrics collected during extraction."""
    estimated_tokens: int = 0
    strategy_used: str = ""
    chunks_total: int = 0
    failed_chunks: List[int] = field(default_factory=list)
    requests_sent: int = 0
    request_failures: int = 0
    simplified_retries: int = 0
    groups_extracted: int = 0
    entries_extracted: int = 0
    duration_seconds: float = 0.0


def _prefer(first: ExtractionResult, retry: ExtractionResult) -> ExtractionResult:
    """Pick between a primary attempt and its simplified retry."""
    if len(retry.groups) > len(first.groups):
        return retry
    if len(retry.groups) == len(first.groups) and first.degraded and not retry.degraded:
        return retry
    return first


class ExtractionOrchestrator:
    """Runs single-pass or chunked extraction for one cause list document."""

    def __init__(
        self,
        text: str,
        client: ExtractionClient,
        profile: CauseListProfile = NCLT,
        config: ExtractionConfig = DEFAULT_CONFIG,
        simplified_client: Optional[ExtractionClient] = None,
    ):
        self.text = text
        self.client = client
        self.simplified_client = simplified_client or client
        self.profile = profile
        self.config = config
        self.metrics = PipelineMetrics()
        self._semaphore: Optional[asyncio.Semaphore] = None

    async def run(self) -> ExtractionResult:
        """Execute the full extraction strategy."""
        if not self.text or not self.text.strip():
            raise ValueError("Cannot extract a cause list from an empty document")

        start_time = time.monotonic()
        self._semaphore = asyncio.Semaphore(self.config.max_concurrent_requests)
        self.metrics.estimated_tokens = estimate_tokens(self.text)
        self._log(f"Document: {len(self.text):,} chars (~{self.metrics.estimated_tokens:,} tokens)")

        if should_chunk(self.text, self.profile.hard_chunk_threshold_tokens):
            self.metrics.strategy_used = "chunked"
            self._log(f"Strategy: chunked (above {self.profile.hard_chunk_threshold_tokens:,} tokens)")
            result = await self._execute_chunked()
        else:
            result = await self._execute_single_pass()

        self.metrics.duration_seconds = time.monotonic() - start_time
        self.metrics.groups_extracted = len(result.groups)
        self.metrics.entries_extracted = result.total_entries
        self._log(
            f"Done: {len(result.groups)} {self.profile.group_noun}(s), {result.total_entries} case(s) "
            f"in {self.metrics.duration_seconds:.1f}s ({self.metrics.strategy_used})"
        )
        return result

    async def _execute_single_pass(self) -> ExtractionResult:
        """Whole document in one request, with one simplified retry."""
        self.metrics.strategy_used = "single_pass"
        self._log("Strategy: single pass")

        outcome = await self._extract_text(
            self.text, index=0, min_groups=self.profile.min_expected_groups
        )
        result = outcome.unwrap_or(fallback_result(self.profile))

        if outcome.attempts > 1:
            self.metrics.strategy_used = "single_pass_retry"

        if (
            len(result.groups) < self.profile.min_expected_groups
            and self.metrics.estimated_tokens > self.config.soft_chunk_threshold_tokens
        ):
            self._log(
                f"Only {len(result.groups)} {self.profile.group_noun}(s) after retry; "
                f"escalating to chunked extraction"
            )
            self.metrics.strategy_used = "escalated_chunking"
            return await self._execute_chunked()

        merged = merge_results([result], self.profile)
        if not outcome.success:
            self.metrics.failed_chunks = [0]
            merged.failed_chunks = [0]
        return merged

    async def _execute_chunked(self) -> ExtractionResult:
        """Extract every chunk concurrently, then merge in chunk order."""
        chunks = split_into_chunks(self.text, self.config.chunk_max_chars)
        self.metrics.chunks_total = len(chunks)
        self._log(
            f"Split into {len(chunks)} chunks "
            f"(max {self.config.chunk_max_chars:,} chars, ~{self.config.chunk_max_tokens:,} tokens)"
        )

        gathered = await asyncio.gather(
            *(self._extract_chunk(chunk) for chunk in chunks),
            return_exceptions=True,
        )

        # gather keeps submission order, so this is chunk index order
        outcomes: List[ChunkOutcome] = []
        for chunk, item in zip(chunks, gathered):
            if isinstance(item, BaseException):
                if not isinstance(item, Exception):
                    raise item
                logger.error(f"Chunk {chunk.index + 1}/{len(chunks)} crashed: {item!r}")
                item = ChunkOutcome.fail(chunk.index, f"{type(item).__name__}: {item}")
            outcomes.append(item)

        failed = [o.index for o in outcomes if not o.success]
        if failed:
            logger.warning(f"{len(failed)} of {len(chunks)} chunks failed: {[i + 1 for i in failed]}")

        merged = merge_results(
            [o.unwrap_or(fallback_result(self.profile)) for o in outcomes],
            self.profile,
        )
        merged.failed_chunks = failed
        self.metrics.failed_chunks = failed
        return merged

    async def _extract_chunk(self, chunk: Chunk) -> ChunkOutcome:
        self._log(f"Chunk {chunk.index + 1}/{self.metrics.chunks_total}: {chunk.size:,} chars")
        outcome = await self._extract_text(chunk.text, index=chunk.index, min_groups=1)
        self._log(
            f"Chunk {chunk.index + 1}: {outcome.group_count} {self.profile.group_noun}(s)"
            + ("" if outcome.success else f" [failed: {outcome.error}]")
        )
        return outcome

    async def _extract_text(self, text: str, index: int, min_groups: int) -> ChunkOutcome:
        """Primary attempt, then one simplified retry if too few groups came back."""
        result, error = await self._attempt(text, "primary", index)
        attempts = 1

        if len(result.groups) < min_groups:
            self.metrics.simplified_retries += 1
            self._log(
                f"[{index + 1}] {len(result.groups)} {self.profile.group_noun}(s) from primary prompt; "
                f"retrying with simplified prompt"
            )
            retry, retry_error = await self._attempt(text, "simplified", index)
            attempts = 2
            chosen = _prefer(result, retry)
            if chosen is retry:
                error = retry_error
            result = chosen

        if not result.degraded:
            return ChunkOutcome.ok(index, result, attempts=attempts)
        return ChunkOutcome.partial(index, result, error or "unparseable response", attempts=attempts)

    async def _attempt(self, text: str, variant: PromptVariant, index: int):
        """One request/sanitize round. Never raises for service or parse problems."""
        request = build_request(
            text,
            variant,
            self.profile,
            simplified_max_chars=self.config.simplified_prompt_max_chars,
            primary_temperature=self.config.primary_temperature,
            simplified_temperature=self.config.simplified_temperature,
        )
        client = self.client if variant == "primary" else self.simplified_client

        try:
            raw = await self._call_client(client, request, index)
        except TransportError as e:
            self.metrics.request_failures += 1
            logger.warning(f"[{index + 1}] {variant} request failed: {e}")
            return fallback_result(self.profile), str(e)

        result = sanitize_response(raw, self.profile)
        return result, ("unparseable response" if result.degraded else None)

    async def _call_client(self, client: ExtractionClient, request, index: int) -> str:
        """Call the service under the concurrency bound, backing off on rate limits."""
        attempt = 0
        while True:
            try:
                async with self._semaphore:
                    self.metrics.requests_sent += 1
                    return await asyncio.wait_for(
                        client.extract(request),
                        timeout=self.config.request_timeout_seconds,
                    )
            except asyncio.TimeoutError as e:
                raise TransportError(
                    f"request timed out after {self.config.request_timeout_seconds:.0f}s"
                ) from e
            except RateLimitError as e:
                if attempt >= self.config.max_rate_limit_retries:
                    raise
                delay = e.retry_after or self.config.rate_limit_retry_base_delay * (2 ** attempt)
                attempt += 1
                logger.warning(
                    f"[{index + 1}] rate limit hit, waiting {delay:.1f}s "
                    f"(attempt {attempt}/{self.config.max_rate_limit_retries})"
                )
                await asyncio.sleep(delay)

    def _log(self, message: str) -> None:
        logger.info(f"[{self.profile.name}] {message}")

import asyncio
from typing import Optional, Union

from .client import ExtractionClient, build_default_client, build_simplified_client
from .config import ExtractionConfig, DEFAULT_CONFIG
from .pipeline import ExtractionOrchestrator
from .profiles import CauseListProfile, NCLT, get_profile
from .schemas import ExtractionResult


def _resolve_profile(profile: Union[CauseListProfile, str]) -> CauseListProfile:
    if isinstance(profile, str):
        return get_profile(profile)
    return profile


async def aextract_cause_list(
    text: str,
    profile: Union[CauseListProfile, str] = NCLT,
    client: Optional[ExtractionClient] = None,
    config: Optional[ExtractionConfig] = None,
    simplified_client: Optional[ExtractionClient] = None,
) -> ExtractionResult:
    """Extract a structured cause list from document text.

    Without an injected ``client`` the OpenAI primary model is used with the
    fallback model behind it, and simplified retries go to the fallback model.
    """
    config = config or DEFAULT_CONFIG
    profile = _resolve_profile(profile)

    owned = []
    try:
        if client is None:
            client = build_default_client(config)
            owned.append(client)
            if simplified_client is None:
                simplified_client = build_simplified_client(config)
                owned.append(simplified_client)

        orchestrator = ExtractionOrchestrator(
            text,
            client,
            profile=profile,
            config=config,
            simplified_client=simplified_client,
        )
        return await orchestrator.run()
    finally:
        for owned_client in owned:
            await owned_client.aclose()


def extract_cause_list(
    text: str,
    profile: Union[CauseListProfile, str] = NCLT,
    client: Optional[ExtractionClient] = None,
    config: Optional[ExtractionConfig] = None,
    simplified_client: Optional[ExtractionClient] = None,
) -> ExtractionResult:
    """Synchronous wrapper around :func:`aextract_cause_list`."""
    return asyncio.run(aextract_cause_list(
        text,
        profile=profile,
        client=client,
        config=config,
        simplified_client=simplified_client,
    ))

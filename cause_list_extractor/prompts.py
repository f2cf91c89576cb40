"""Composable prompt components for cause list extraction."""

import json
from typing import List

from .profiles import CauseListProfile
from .schemas import ExtractionRequest, PromptVariant


SYSTEM_PROMPT = (
    "You are an expert at parsing legal documents and extracting structured data. "
    "You must respond with ONLY valid JSON. No explanations, no markdown, no additional text. "
    "The JSON must be complete and properly formatted."
)

SIMPLIFIED_SYSTEM_PROMPT = "Return ONLY valid JSON. No other text."


JSON_ONLY_RULE = """CRITICAL: You must respond with ONLY valid JSON. No explanations, no markdown formatting, no additional text."""


ENTRY_FIELD_RULES = """- Extract ALL cases with their serial numbers (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, etc.) - DO NOT MISS ANY CASES
- Do NOT extract petitioner, respondent, advocate, or application information
- ONLY extract serialNumber and caseNumber - NO other fields
- Count carefully - extract all listed cases"""


def _example_document(profile: CauseListProfile, placeholders: bool) -> dict:
    """Worked example of the output shape, one group per sample case."""
    groups = []
    for serial, heading, case_number in profile.sample_cases:
        number = profile.key_from_name(heading) or str(len(groups) + 1)
        entry = {
            profile.serial_key: "Serial number as string" if placeholders else serial,
            profile.case_key: "Complete case number" if placeholders else case_number,
        }
        groups.append({
            profile.number_key: number,
            profile.name_key: heading,
            profile.entries_key: [entry],
        })
    return {
        "court": profile.court_label,
        "date": "Date in DD-MM-YYYY format" if placeholders else profile.sample_date,
        profile.groups_key: groups,
    }


def _heading_rules(profile: CauseListProfile) -> str:
    lines = [
        f'    - "{heading}" → {profile.number_key}: "{number}"'
        for heading, number in profile.heading_examples
    ]
    return "\n".join(lines)


def build_primary_prompt(text: str, profile: CauseListProfile) -> str:
    """Full instructions with a worked example of the expected JSON."""
    rules: List[str] = [
        ENTRY_FIELD_RULES,
        f"- Extract case numbers exactly as they appear ({profile.case_number_examples})",
        f"- Group cases by {profile.group_noun} and keep the {profile.group_noun} heading exactly as printed",
        "- Extract the court date and other header information",
    ]
    rules.extend(f"- {rule}" for rule in profile.extra_rules)

    example = json.dumps(_example_document(profile, placeholders=True), indent=2, ensure_ascii=False)

    return f"""You are an expert at parsing {profile.description} PDFs. Parse the following text and extract structured case data.

{JSON_ONLY_RULE}

IMPORTANT RULES:
{chr(10).join(rules)}
- CRITICAL: Identify {profile.group_noun}s consistently using these patterns:
{_heading_rules(profile)}

This document may contain multiple {profile.group_noun}s. You MUST extract ALL {profile.group_noun}s and ALL of their cases.

Return ONLY this exact JSON structure (no other text):
{example}

PDF TEXT TO PARSE:
{text}"""


def build_simplified_prompt(text: str, profile: CauseListProfile, max_chars: int) -> str:
    """Short instruction over a bounded prefix of the text."""
    example = json.dumps(_example_document(profile, placeholders=False), indent=2, ensure_ascii=False)

    return f"""Extract case data from this {profile.description}. Return ONLY valid JSON in this exact format:

{example}

CRITICAL REQUIREMENTS:
- Extract ALL {profile.group_noun}s and ALL cases from EACH {profile.group_noun}
- Only extract {profile.serial_key} and {profile.case_key}

Text: {text[:max_chars]}"""


def build_request(
    text: str,
    variant: PromptVariant,
    profile: CauseListProfile,
    simplified_max_chars: int = 50_000,
    primary_temperature: float = 0.1,
    simplified_temperature: float = 0.0,
) -> ExtractionRequest:
    """Build the request payload for one extraction attempt."""
    if variant == "primary":
        return ExtractionRequest(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_primary_prompt(text, profile),
            variant="primary",
            temperature=primary_temperature,
        )
    if variant == "simplified":
        return ExtractionRequest(
            system_prompt=SIMPLIFIED_SYSTEM_PROMPT,
            user_prompt=build_simplified_prompt(text, profile, simplified_max_chars),
            variant="simplified",
            temperature=simplified_temperature,
        )
    raise ValueError(f"Unknown prompt variant: {variant!r}")

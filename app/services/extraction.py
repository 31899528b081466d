"""
Free-text → partial operational profile.

The only non-deterministic collaborator of the assessment flow. Callers
depend on the Extractor protocol; GatewayExtractor is the production
implementation against an OpenAI-compatible chat-completions gateway
with a forced `extract_risk_data` tool call.

Single attempt, no retry. Every failure mode (HTTP error, timeout,
unparseable or invalid response) comes back as `ExtractionResult.error`;
extract() itself does not raise.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Optional, Protocol

import httpx
import structlog
from pydantic import ValidationError

from app.core.config import Settings
from app.schemas.profile import (
    PROFILE_FIELDS,
    Contaminant,
    DischargeMethod,
    IndustrySector,
    IntakeQuality,
    MonitoringFrequency,
    PartialOperationalProfile,
    Provenance,
    TreatmentLevel,
    UpstreamPollutionSource,
    WaterSource,
)

logger = structlog.get_logger()


@dataclass
class ExtractionResult:
    profile: Optional[PartialOperationalProfile] = None
    provenance: dict[str, Provenance] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.profile is not None


class Extractor(Protocol):
    async def extract(self, text: str) -> ExtractionResult:
        ...


# ═══════════════════════════════════════════════════════════════
# Gateway wire format
# ═══════════════════════════════════════════════════════════════
TOOL_NAME = "extract_risk_data"

# Never dropped: an invalid value for these fails the whole extraction
REQUIRED_FIELDS = ("industry_sector", "country")

# Tool argument name → profile field
FIELD_MAP = {
    "companyName": "company_name",
    "industrySector": "industry_sector",
    "primaryLocationCountry": "country",
    "primaryLocationRegion": "region",
    "facilitiesCount": "facilities_count",
    "waterSources": "water_sources",
    "estimatedWaterConsumption": "annual_water_volume",
    "currentTreatment": "current_treatment",
    "intakeWaterQuality": "intake_water_quality",
    "primaryContaminants": "primary_contaminants",
    "dischargeMethod": "discharge_method",
    "dischargeComplianceConcerns": "discharge_compliance_concerns",
    "upstreamPollutionSources": "upstream_pollution_sources",
    "waterQualityTestingFrequency": "water_quality_testing_frequency",
    "waterDisruptions": "water_disruptions_past_5y",
}

SYSTEM_PROMPT = """You are a water risk assessment expert. Extract structured data from a user's description of their business operations.

Be intelligent about inferring information:
- "chip factory", "fab", "wafer" → Semiconductors
- "data center", "server farm", "cloud" → Data Centers
- "pharma", "drug", "medicine" → Pharmaceuticals
- waterDisruptions is true if ANY water issue is mentioned (drought, scarcity, shortage, supply problems, restrictions)
- recycling, reuse or ultrapure water → currentTreatment "Advanced"
- estimatedWaterConsumption is in m³/year, scaled by the number of facilities

Only fill fields the text supports. In confidenceFields mark each field you return as "stated" if the text says it explicitly, or "inferred" otherwise."""


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def _string_list(enum_cls) -> dict:
    return {"type": "array", "items": {"type": "string", "enum": _enum_values(enum_cls)}}


def tool_definition() -> dict:
    return {
        "type": "function",
        "function": {
            "name": TOOL_NAME,
            "description": "Extract water risk assessment parameters from the user's description",
            "parameters": {
                "type": "object",
                "properties": {
                    "companyName": {"type": "string"},
                    "industrySector": {"type": "string", "enum": _enum_values(IndustrySector)},
                    "primaryLocationCountry": {"type": "string"},
                    "primaryLocationRegion": {"type": "string"},
                    "facilitiesCount": {"type": "number"},
                    "waterSources": _string_list(WaterSource),
                    "estimatedWaterConsumption": {"type": "number"},
                    "currentTreatment": {"type": "string", "enum": _enum_values(TreatmentLevel)},
                    "intakeWaterQuality": {"type": "string", "enum": _enum_values(IntakeQuality)},
                    "primaryContaminants": _string_list(Contaminant),
                    "dischargeMethod": {"type": "string", "enum": _enum_values(DischargeMethod)},
                    "dischargeComplianceConcerns": {"type": "boolean"},
                    "upstreamPollutionSources": _string_list(UpstreamPollutionSource),
                    "waterQualityTestingFrequency": {"type": "string", "enum": _enum_values(MonitoringFrequency)},
                    "waterDisruptions": {"type": "boolean"},
                    "confidenceFields": {"type": "object", "additionalProperties": {"type": "string"}},
                },
                "required": ["industrySector", "primaryLocationCountry"],
            },
        },
    }


def parse_completion(payload) -> Optional[dict]:
    """Tool-call arguments first, then a JSON object embedded in the message text."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None

    tool_calls = message.get("tool_calls")
    if isinstance(tool_calls, list) and tool_calls and isinstance(tool_calls[0], dict):
        function = tool_calls[0].get("function")
        args = function.get("arguments") if isinstance(function, dict) else None
        if isinstance(args, str) and args.strip():
            args = json.loads(args)
        if isinstance(args, dict):
            return args

    content = message.get("content")
    if isinstance(content, str):
        match = re.search(r"\{[\s\S]*\}", content)
        if match:
            parsed = json.loads(match.group(0))
            if isinstance(parsed, dict):
                return parsed
    return None


def to_profile(arguments: dict) -> tuple[PartialOperationalProfile, dict[str, Provenance]]:
    """
    Map tool arguments onto a partial profile.

    Optional values that fail validation are dropped so the normalizer fills
    them from the benchmark. Only a bad industry or country raises
    ValidationError. Untagged fields count as inferred, except industry and
    country which the extraction requires the text to name.
    """
    values = {FIELD_MAP[k]: v for k, v in arguments.items() if k in FIELD_MAP and v is not None}

    dropped = []
    for name in list(values):
        if name in REQUIRED_FIELDS:
            continue
        try:
            PartialOperationalProfile.model_validate({name: values[name]})
        except ValidationError:
            dropped.append(name)
            del values[name]
    if dropped:
        logger.info("extraction_fields_dropped", fields=sorted(dropped))

    profile = PartialOperationalProfile.model_validate(values)

    tags = arguments.get("confidenceFields")
    if not isinstance(tags, dict):
        tags = {}
    tags = {FIELD_MAP.get(k, k): v for k, v in tags.items()}

    provenance: dict[str, Provenance] = {}
    for name in PROFILE_FIELDS:
        if name not in values:
            continue
        if name in REQUIRED_FIELDS:
            provenance[name] = Provenance.STATED
        elif tags.get(name) in (Provenance.STATED.value, Provenance.INFERRED.value):
            provenance[name] = Provenance(tags[name])
        else:
            provenance[name] = Provenance.INFERRED
    return profile, provenance


class GatewayExtractor:
    """Chat-completions client. One POST per description."""

    def __init__(
        self,
        url: str,
        api_key: str,
        model: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayExtractor":
        return cls(
            url=settings.extraction_gateway_url,
            api_key=settings.extraction_api_key,
            model=settings.extraction_model,
            timeout=settings.extraction_timeout_seconds,
        )

    async def extract(self, text: str) -> ExtractionResult:
        if not self.api_key:
            logger.error("extraction_not_configured")
            return ExtractionResult(error="Description analysis is not configured. Please use the structured form.")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            "tools": [tool_definition()],
            "tool_choice": {"type": "function", "function": {"name": TOOL_NAME}},
        }

        logger.info("extraction_started", model=self.model, chars=len(text))
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=body,
                )
        except httpx.TimeoutException:
            logger.warning("extraction_failed", reason="timeout", timeout=self.timeout)
            return ExtractionResult(error="Description analysis timed out. Please try again.")
        except httpx.HTTPError as e:
            logger.warning("extraction_failed", reason="transport", error=str(e))
            return ExtractionResult(error="Could not reach the description analysis service. Please try again.")

        if resp.status_code == 429:
            logger.warning("extraction_failed", reason="rate_limited", status=resp.status_code)
            return ExtractionResult(error="Rate limit exceeded. Please try again in a moment.")
        if resp.status_code == 402:
            logger.warning("extraction_failed", reason="credits_exhausted", status=resp.status_code)
            return ExtractionResult(error="AI credits required. Please add credits to continue.")
        if resp.status_code >= 400:
            logger.warning("extraction_failed", reason="gateway_error", status=resp.status_code, body=resp.text[:500])
            return ExtractionResult(error="Description analysis failed. Please try again.")

        try:
            arguments = parse_completion(resp.json())
        except ValueError as e:
            logger.warning("extraction_failed", reason="unparseable_response", error=str(e))
            return ExtractionResult(error="Failed to extract data from the description.")

        if not arguments:
            logger.warning("extraction_failed", reason="empty_response")
            return ExtractionResult(error="Failed to extract data from the description.")

        try:
            profile, provenance = to_profile(arguments)
        except ValidationError as e:
            logger.warning("extraction_failed", reason="invalid_profile", errors=e.error_count())
            return ExtractionResult(error="The description could not be turned into a valid profile.")

        logger.info(
            "extraction_complete",
            fields=sorted(profile.model_dump(exclude_none=True)),
            stated=sum(1 for p in provenance.values() if p == Provenance.STATED),
        )
        return ExtractionResult(profile=profile, provenance=provenance)

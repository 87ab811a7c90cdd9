from __future__ import annotations

import re
from typing import List, Optional

from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.profile import UserContext
from healthnav.domain.schemas.result_data import ExtractionResult

_INTERNAL_CAPITAL_RE = re.compile(r"(?<!^)([A-Z])")

SYSTEM_PROMPT = (
    'You are "HealthNav Assistant", an AI helper within a personalized health application. '
    "Your goal is to explain general health concepts, nutrition information, and fitness ideas "
    "clearly and simply, based on common knowledge. "
    "You MUST NOT provide medical diagnoses, treatment plans, interpretations of specific medical "
    "results, or personalized medical advice. "
    'Always include a disclaimer like "Remember, this is general information and not medical advice. '
    'Consult your doctor for personal health concerns." if the user asks about conditions or '
    "specific health actions. "
    "Keep responses concise, friendly, and encouraging. Focus on general wellness education."
)

BLOOD_REPORT_HEADER = "Analyze these blood report values:"
BLOOD_REPORT_SUFFIX = (
    "Explain 1-2 key results simply. Give one general wellness tip. "
    "DO NOT diagnose or give medical advice. "
    'Start with "Based on extracted values:" End with a disclaimer that this is not medical advice.'
)

NUTRITION_HEADER = "Analyze the nutritional info:"
NUTRITION_SUFFIX = (
    "Is it suitable? Explain concerns (sodium, sugar etc.) related to the user's profile simply "
    "(2-3 sentences). Add a disclaimer. NO medical advice."
)


def humanize_field_name(name: str) -> str:
    """Insert a space before every internal capital: "TotalFat" -> "Total Fat"."""
    return _INTERNAL_CAPITAL_RE.sub(r" \1", name).strip()


def format_values(result: ExtractionResult) -> str:
    return "\n".join(f"- {humanize_field_name(k)}: {v}" for k, v in result.present.items())


def format_context(context: Optional[UserContext]) -> str:
    if context is None or context.is_empty:
        return ""
    conditions = ", ".join(context.effective_conditions) or "None"
    goals = ", ".join(context.effective_goals) or "None"
    return f"User Context:\n- Conditions: {conditions}\n- Goals: {goals}"


def build_insight_prompt(result: ExtractionResult, context: Optional[UserContext] = None) -> str:
    if result.doc_type == DocumentType.NUTRITION_LABEL:
        header, suffix = NUTRITION_HEADER, NUTRITION_SUFFIX
    else:
        header, suffix = BLOOD_REPORT_HEADER, BLOOD_REPORT_SUFFIX

    parts: List[str] = [header, format_values(result)]
    ctx = format_context(context)
    if ctx:
        parts.append(ctx)
    parts.append(suffix)
    return "\n".join(parts)


def build_chat_prompt(question: str, context: Optional[UserContext] = None) -> str:
    prompt = f'User question: "{question.strip()}"'
    if context is None or context.is_empty:
        return prompt

    lines = ["User Context (for background info, do NOT diagnose based on this):"]
    if context.effective_conditions:
        lines.append(f"- Health Conditions: {', '.join(context.effective_conditions)}")
    if context.effective_goals:
        lines.append(f"- Health Goals: {', '.join(context.effective_goals)}")
    return prompt + "\n\n" + "\n".join(lines)


class InsightPromptService:
    """Thin object wrapper so the pipeline can swap prompt wording per deployment."""

    system_prompt = SYSTEM_PROMPT

    def build(self, result: ExtractionResult, context: Optional[UserContext] = None) -> str:
        return build_insight_prompt(result, context)

    def build_chat(self, question: str, context: Optional[UserContext] = None) -> str:
        return build_chat_prompt(question, context)

"""
Response generator for PartSelect chat agent.

Turns a turn's outcome into the user-facing message:
- templated formatting per tool (search, compatibility, installation, troubleshooting)
- static replies when no tool ran (capability overview, clarifications)
- apologies that name the failure without exposing internals

When an LLM gateway is configured, a successful tool answer can be rephrased
by the model. Any gateway error keeps the templated text.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .base_agent import Observation
from .deepseek_client import DeepseekClient
from .errors import GatewayError
from .prompts import (
    CAPABILITY_OVERVIEW,
    CLIENT_FACING_SYSTEM_PROMPT,
    NO_RESULTS_RESPONSE_TEMPLATE,
    TOOL_FAILURE_TEMPLATE,
    TOOL_GUIDANCE,
)

logger = logging.getLogger(__name__)

AVAILABILITY_LABELS = {
    "in-stock": "In stock",
    "backordered": "Backordered",
    "out-of-stock": "Out of stock",
}

FAILURE_HINTS = {
    "ProductSearch": "Try describing the part differently, or include a part number.",
    "CompatibilityCheck": "Please include both the part number and your appliance's model number.",
    "InstallationGuide": "Please double-check the part number, or search for the part by name first.",
    "TroubleshootingGuide": "Try describing what the appliance is doing, e.g. 'dishwasher not draining'.",
}


def _price(value: Any) -> str:
    return f"${float(value):.2f}"


def _product_line(product: Dict[str, Any]) -> str:
    availability = AVAILABILITY_LABELS.get(product.get("availability"), product.get("availability"))
    return f"**{product['name']}** ({product['part_number']}) - {_price(product['price'])}, {availability}"


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


class ResponseGenerator:
    """Builds final responses from tool observations."""

    def __init__(self, deepseek_client: Optional[DeepseekClient] = None, synthesis_enabled: bool = True):
        """
        Args:
            deepseek_client: Optional LLM gateway used for rephrasing
            synthesis_enabled: Allow the gateway to rephrase templated answers
        """
        self.deepseek = deepseek_client
        self.synthesis_enabled = synthesis_enabled
        self._formatters: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "ProductSearch": self.format_search,
            "CompatibilityCheck": self.format_compatibility,
            "InstallationGuide": self.format_installation,
            "TroubleshootingGuide": self.format_troubleshooting,
        }

    def generate(
        self,
        message: str,
        tool_name: Optional[str],
        observation: Optional[Observation],
        fallback_reply: Optional[str] = None
    ) -> Tuple[str, bool]:
        """
        Compose the final response.

        Returns:
            (response text, whether the LLM rephrased it)
        """
        if observation is None:
            return fallback_reply or CAPABILITY_OVERVIEW, False

        if not observation.success:
            return self.format_failure(tool_name, observation.error, observation.suggestions), False

        formatter = self._formatters.get(tool_name)
        if formatter is None:
            draft = json.dumps(observation.result, indent=2, default=str)
        else:
            draft = formatter(observation.result or {})

        synthesized = self._synthesize(message, tool_name, draft, observation.result or {})
        if synthesized is not None:
            return synthesized, True
        return draft, False

    def _synthesize(self, message: str, tool_name: Optional[str], draft: str, data: Dict[str, Any]) -> Optional[str]:
        if not self.synthesis_enabled or self.deepseek is None or not self.deepseek.is_configured:
            return None

        guidance = TOOL_GUIDANCE.get(tool_name)
        system_prompt = CLIENT_FACING_SYSTEM_PROMPT + ("\n\n" + guidance() if guidance else "")
        tool_data = {key: value for key, value in data.items() if key != "products"}

        try:
            return self.deepseek.generate_response(
                messages=[{
                    "role": "user",
                    "content": (
                        f"User asked: {message}\n\n"
                        f"Draft answer:\n{draft}\n\n"
                        f"Tool data:\n{json.dumps(tool_data, indent=2, default=str)}\n\n"
                        "Rewrite the draft as a helpful, clear reply to the user."
                    ),
                }],
                system_prompt=system_prompt,
                temperature=0.7,
                max_tokens=800
            )
        except GatewayError as e:
            logger.warning(f"LLM synthesis failed, using templated response: {e}")
            return None

    # ------------------------------------------------------------------
    # Failure
    # ------------------------------------------------------------------

    @staticmethod
    def format_failure(tool_name: Optional[str], error: Optional[str], suggestions: Optional[List[str]] = None) -> str:
        reason = (error or "an unknown error occurred").rstrip(".")
        hint = FAILURE_HINTS.get(tool_name, "Please try rephrasing your question.")
        if suggestions:
            hint = _bullets(suggestions) + "\n\n" + hint
        return TOOL_FAILURE_TEMPLATE.format(reason=reason, suggestions=hint)

    # ------------------------------------------------------------------
    # Per-tool templates
    # ------------------------------------------------------------------

    @staticmethod
    def format_search(data: Dict[str, Any]) -> str:
        products = data.get("products", [])
        total = data.get("total_count", len(products))

        if total == 0 or not products:
            criteria = ", ".join(data.get("criteria", [])) or "your request"
            suggestions = _bullets(data.get("suggestions", [])) or "- Try different keywords"
            return NO_RESULTS_RESPONSE_TEMPLATE.format(criteria=criteria, suggestions=suggestions)

        noun = "part" if total == 1 else "parts"
        header = f"I found {total} {noun} matching your request"
        if total > len(products):
            header += f", here are the top {len(products)}"

        lines = [header + ":", ""]
        for i, product in enumerate(products, 1):
            lines.append(f"{i}. {_product_line(product)}")
            lines.append(
                f"   {product['installation_difficulty'].capitalize()} install, "
                f"about {product['estimated_install_time']} minutes"
            )
        lines.append("")
        lines.append("Would you like installation instructions or a compatibility check for any of these?")
        return "\n".join(lines)

    @staticmethod
    def format_compatibility(data: Dict[str, Any]) -> str:
        part_number = data.get("part_number")
        model_number = data.get("model_number")
        part = data.get("part")

        if not data.get("part_found") or part is None:
            return (
                f"I couldn't find part {part_number} in our catalog, so I can't confirm whether it fits "
                f"your {model_number}. {data.get('recommendation', '')}"
            ).strip()

        if data.get("is_compatible"):
            text = (
                f"Yes, {part['name']} ({part['part_number']}) is compatible with model {model_number} "
                f"({data.get('confidence_label')}, {data.get('confidence', 0):.0%} confidence).\n\n"
                f"{data.get('reason', '')}"
            )
        else:
            text = (
                f"No, {part['name']} ({part['part_number']}) is not listed as compatible with "
                f"model {model_number}.\n\n{data.get('reason', '')}"
            )
            alternatives = data.get("alternative_parts", [])
            if alternatives:
                text += f"\n\nParts that do fit your {model_number}:\n"
                text += _bullets([_product_line(p) for p in alternatives])

        recommendation = data.get("recommendation")
        if recommendation:
            text += f"\n\n{recommendation}"
        return text

    @staticmethod
    def format_installation(data: Dict[str, Any]) -> str:
        lines = [
            f"**How to install {data['part_name']} ({data['part_number']})**",
            "",
            f"Difficulty: {data['difficulty'].capitalize()} | Estimated time: {data['estimated_time']} minutes",
            "",
            "**Required tools:**",
            _bullets(data.get("required_tools", [])) or "- None",
        ]

        warnings = data.get("safety_warnings", [])
        if warnings:
            lines += ["", "**Safety warnings:**", _bullets(warnings)]

        lines += ["", "**Steps:**"]
        for step in data.get("steps", []):
            lines.append(f"{step['step']}. **{step['title']}**: {step['description']}")
            if step.get("warning"):
                lines.append(f"   Warning: {step['warning']}")

        if data.get("generic_steps"):
            lines += ["", "These are general steps. Check your appliance manual for model-specific details."]

        notes = data.get("additional_notes", [])
        if notes:
            lines += ["", "**Additional notes:**", _bullets(notes)]
        return "\n".join(lines)

    @staticmethod
    def format_troubleshooting(data: Dict[str, Any]) -> str:
        lines = [f"**Troubleshooting: {data['symptom']}**", ""]

        causes = data.get("common_causes", [])
        if causes:
            lines += ["**Common causes:**", _bullets(causes), ""]

        lines.append("**Diagnostic steps:**")
        for step in data.get("diagnostic_steps", []):
            lines.append(f"{step['step']}. {step['description']}")
            lines.append(f"   Expected: {step['expected_result']}")
            if step.get("recommended_action"):
                lines.append(f"   Action: {step['recommended_action']}")
            if step.get("next_step_if_true"):
                lines.append(f"   If this checks out, continue to step {step['next_step_if_true']}.")
            if step.get("next_step_if_false"):
                lines.append(f"   If not, go to step {step['next_step_if_false']}.")

        if data.get("should_contact_professional"):
            lines += ["", f"**We recommend contacting a professional.** {data.get('professional_reason') or ''}".rstrip()]

        parts = data.get("recommended_parts", [])
        if parts:
            lines += ["", "**Recommended parts:**", _bullets([_product_line(p) for p in parts])]

        others = data.get("other_matches", [])
        if others:
            lines += ["", "Related issues: " + "; ".join(others)]
        return "\n".join(lines)

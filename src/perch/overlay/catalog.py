"""Named overlay configurations for the fact-checking UI.

Entries are kept in the same shape the front end uses (camelCase keys) and
validated into :class:`~perch.overlay.config.OverlayConfig` on lookup.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from perch.overlay.config import OverlayConfig

CATALOG: dict[str, dict[str, Any]] = {
    "confidenceScore": {
        "title": "Confidence Score",
        "content": (
            "This score represents how certain our AI models are about their "
            "verdict. Higher scores indicate stronger agreement across multiple "
            "verification sources."
        ),
        "type": "explanation",
        "maxWidth": 280,
    },
    "aiModelWeights": {
        "title": "AI Model Contributions",
        "content": (
            "Different AI models have varying expertise in different domains. We "
            "weight their contributions based on their strengths in the topic "
            "being fact-checked."
        ),
        "type": "explanation",
        "maxWidth": 300,
    },
    "factCheckProcess": {
        "title": "Multi-Source Verification",
        "content": (
            "We use multiple AI models and cross-reference their findings to "
            "provide you with the most accurate verdict possible. This process "
            "helps reduce bias and improve reliability."
        ),
        "type": "info",
        "maxWidth": 320,
    },
    "domainDetection": {
        "title": "Topic Analysis",
        "content": (
            "We automatically detect the subject domain of your statement "
            "(medical, scientific, historical, etc.) to assign the most qualified "
            "AI models for verification."
        ),
        "type": "explanation",
        "maxWidth": 300,
    },
    "subscriptionTier": {
        "title": "Verification Tier",
        "content": (
            "This badge shows which subscription tier was used for this "
            "fact-check. Higher tiers use more AI models for increased accuracy "
            "and reliability."
        ),
        "type": "info",
        "maxWidth": 280,
    },
    "voiceInput": {
        "title": "Voice Input",
        "content": (
            "Click to start voice recognition. Speak clearly and we'll convert "
            "your speech to text for fact-checking. Works best in quiet "
            "environments."
        ),
        "type": "help",
        "maxWidth": 260,
    },
    "historicalContext": {
        "title": "Historical Context",
        "content": (
            "Additional background information that helps understand the "
            "statement within its proper historical, cultural, or scientific "
            "context."
        ),
        "type": "explanation",
        "maxWidth": 300,
    },
    "sourcesExplanation": {
        "title": "Trusted Sources",
        "content": (
            "These are the primary sources our AI models referenced when "
            "fact-checking your statement. Click any source to visit the "
            "original material."
        ),
        "type": "info",
        "maxWidth": 280,
    },
    "manipulationRisk": {
        "title": "Manipulation Risk",
        "content": (
            "This metric indicates how likely the statement is to be designed to "
            "mislead or manipulate opinion, based on language patterns and "
            "content analysis."
        ),
        "type": "warning",
        "maxWidth": 300,
    },
    "contradictionIndex": {
        "title": "Contradiction Level",
        "content": (
            "Measures how much the statement contradicts established facts or "
            "contains internal logical inconsistencies."
        ),
        "type": "explanation",
        "maxWidth": 280,
    },
    "factualConsensus": {
        "title": "Factual Consensus",
        "content": (
            "Shows the level of agreement between our AI models about the "
            "factual accuracy of the statement. Higher consensus indicates "
            "stronger reliability."
        ),
        "type": "explanation",
        "maxWidth": 300,
    },
    "questionTransformation": {
        "title": "Question Processing",
        "content": (
            "We automatically convert questions into verifiable statements while "
            "preserving the original intent, allowing for more accurate "
            "fact-checking."
        ),
        "type": "explanation",
        "maxWidth": 320,
    },
    "implicitClaims": {
        "title": "Implicit Claims",
        "content": (
            "These are additional factual assertions that are implied or "
            "suggested by your original statement, which we also verify for "
            "completeness."
        ),
        "type": "explanation",
        "maxWidth": 300,
    },
    "apiKeyStatus": {
        "title": "API Key Status",
        "content": (
            "Shows which AI services are currently active. More active services "
            "provide more comprehensive fact-checking coverage."
        ),
        "type": "info",
        "maxWidth": 280,
    },
    "subscriptionFeatures": {
        "title": "Premium Features",
        "content": (
            "Upgrade your subscription to access more AI models, unlimited "
            "checks, priority processing, and advanced analytics features."
        ),
        "type": "info",
        "maxWidth": 300,
    },
    "checkFrequency": {
        "title": "Check Frequency",
        "content": (
            "Shows how often this particular statement has been fact-checked by "
            "users. Popular statements may indicate trending topics or "
            "widespread misinformation."
        ),
        "type": "info",
        "maxWidth": 320,
    },
    "dataPrivacy": {
        "title": "Privacy & Security",
        "content": (
            "Your fact-check history is securely stored and only visible to you. "
            "We don't share individual queries with third parties."
        ),
        "type": "info",
        "maxWidth": 280,
    },
    "modelPerformance": {
        "title": "Model Performance",
        "content": (
            "Each AI model's contribution is weighted based on its historical "
            "accuracy in this topic domain and cross-validated against other "
            "models."
        ),
        "type": "explanation",
        "maxWidth": 320,
    },
    "realTimeProcessing": {
        "title": "Real-time Analysis",
        "content": (
            "Your statement is being processed in real-time using the latest AI "
            "models and most current information available."
        ),
        "type": "info",
        "maxWidth": 280,
    },
    "verificationMethodology": {
        "title": "Our Methodology",
        "content": (
            "We use a two-layer verification system: InFact for factual "
            "consensus and DEFAME for misinformation detection, ensuring "
            "comprehensive analysis."
        ),
        "type": "explanation",
        "maxWidth": 340,
    },
    "statementLength": {
        "title": "Statement Optimization",
        "content": (
            "For best results, keep statements clear and specific. Very long or "
            "complex statements may be broken down into smaller components for "
            "analysis."
        ),
        "type": "help",
        "maxWidth": 300,
    },
    "trendingAnalysis": {
        "title": "Trending Facts",
        "content": (
            "These are the most frequently checked statements across all users, "
            "helping identify current topics of interest and potential "
            "misinformation trends."
        ),
        "type": "info",
        "maxWidth": 320,
    },
    "saveFeature": {
        "title": "Save Fact Checks",
        "content": (
            "Save important fact checks to your personal collection for easy "
            "reference. Saved items appear in your history and can be organized "
            "with tags."
        ),
        "type": "help",
        "maxWidth": 300,
    },
    "exportData": {
        "title": "Export Your Data",
        "content": (
            "Download all your fact-check history, saved items, and account data "
            "in a portable format. This ensures you always have access to your "
            "information."
        ),
        "type": "info",
        "maxWidth": 300,
    },
    "themeToggle": {
        "title": "Dark/Light Mode",
        "content": (
            "Switch between light and dark themes for optimal viewing comfort. "
            "Your preference is automatically saved for future visits."
        ),
        "type": "help",
        "maxWidth": 260,
    },
}

FALLBACK_ENTRY: dict[str, Any] = {
    "title": "Information",
    "content": "Additional context and explanation for this feature.",
    "type": "info",
    "maxWidth": 280,
}


def get_config(key: str) -> OverlayConfig:
    """Look up a named configuration, falling back to a generic entry."""
    return OverlayConfig.model_validate(CATALOG.get(key, FALLBACK_ENTRY))


def _interpret_confidence(score: float) -> str:
    if score >= 0.8:
        return "Very high confidence"
    if score >= 0.6:
        return "High confidence"
    if score >= 0.4:
        return "Moderate confidence"
    return "Low confidence"


def get_contextual_config(
    key: str, context: Mapping[str, Any] | None = None
) -> OverlayConfig:
    """Look up a configuration and tailor its content to the given context.

    Supported contexts:
        - ``confidenceScore``: ``score`` (0..1) appends the percentage and
          its interpretation.
        - ``subscriptionTier``: ``tierName`` and ``modelsUsed`` prefix the
          tier summary.
        - ``modelPerformance``: ``modelWeights`` (name -> weight) prefixes
          the highest weighted model.

    Missing or empty context values leave the base configuration unchanged.
    """
    base = get_config(key)
    if not context:
        return base

    if key == "confidenceScore":
        score = context.get("score")
        if score:
            content = (
                f"{base.content} Current score: {float(score) * 100:.0f}% "
                f"({_interpret_confidence(float(score))})"
            )
            return base.model_copy(update={"content": content})

    elif key == "subscriptionTier":
        tier_name = context.get("tierName")
        models_used = context.get("modelsUsed")
        if tier_name and models_used:
            content = (
                f"This fact-check used {tier_name} with {models_used} AI models. "
                f"{base.content}"
            )
            return base.model_copy(update={"content": content})

    elif key == "modelPerformance":
        weights: Mapping[str, float] | None = context.get("modelWeights")
        if weights:
            name, weight = max(weights.items(), key=lambda item: item[1])
            content = (
                f"Primary model: {name} ({float(weight) * 100:.0f}% weight). "
                f"{base.content}"
            )
            return base.model_copy(update={"content": content})

    return base


def catalog_keys() -> list[str]:
    """Return all catalog keys in definition order."""
    return list(CATALOG)

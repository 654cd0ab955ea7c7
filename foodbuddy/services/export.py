"""
Plain-text rendering of an analysis, for copying or sharing.
"""

from typing import List

from foodbuddy.models.analysis import RawAnalysis


def _bullets(items) -> List[str]:
    return [f"- {item.title}: {item.description}" for item in items]


def format_analysis_text(result: RawAnalysis) -> str:
    """Render intent, risks, trade-offs and summary as plain text sections."""
    lines = ["Intent:", result.intent, ""]
    lines += ["Risks:", *_bullets(result.risks), ""]
    lines += ["Trade-offs:", *_bullets(result.tradeoffs), ""]
    lines += ["Summary:", result.summary]

    return "\n".join(lines) + "\n"

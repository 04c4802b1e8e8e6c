"""Prompts and deterministic helpers for revision comments.

The AI collaborator writes the change analysis and the revision comment
when it is reachable. This module builds the prompts it receives, cleans
its replies, and supplies the keyword-based fallback comment used when
the collaborator fails.
"""

import re

DEFAULT_COMMENT = "Updated content with improvements and corrections."
MAX_COMMENT_LENGTH = 200

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")
_REVISION_PREFIX = re.compile(r"^Revision comment:\s*", re.IGNORECASE)
_COMMENT_PREFIX = re.compile(r"^Comment:\s*", re.IGNORECASE)

# First matching rule wins
_FALLBACK_RULES = [
    (("added", "safety"), True, "Added safety warnings and procedural guidance."),
    (("added",), False, "Added new content to enhance documentation completeness."),
    (("modified", "updated"), False,
     "Updated content to reflect current operational requirements."),
    (("removed", "deleted"), False, "Removed obsolete content no longer applicable."),
    (("corrected", "fixed"), False, "Corrected technical information for accuracy."),
    (("reorganized", "restructured"), False,
     "Reorganized content for improved clarity and usability."),
]


def build_analysis_prompt(original: str, current: str) -> str:
    return f"""You are an expert technical documentation analyst. Compare these two XML documents and provide a detailed analysis of what changed. Focus on meaningful changes that would be important for revision tracking in a technical manual.

ORIGINAL XML:
{original}

CURRENT XML:
{current}

Please analyze and provide:
1. What specific content was added, modified, or removed
2. The significance of each change
3. Impact on users/operators
4. Any safety or procedural implications

Format your response as a clear, structured analysis that explains the changes in professional technical documentation language. Be specific about what changed rather than generic.

If no significant changes are detected, state that clearly."""


def build_comment_prompt(analysis: str) -> str:
    return f"""Based on the following detailed change analysis, generate a concise, professional revision comment for a technical manual. The comment should be 1-2 sentences that clearly explain what changed and why it matters to users.

Change Analysis:
{analysis}

Requirements for the revision comment:
- Be specific about what changed (not generic)
- Use professional technical documentation language
- Keep it concise (under 150 characters if possible)
- Focus on the most significant change if multiple changes exist
- Use action words (Updated, Added, Corrected, Modified, etc.)

Examples of good revision comments:
- "Updated caution note under engine startup procedure to reflect new OEM guidance."
- "Added safety warning for high-voltage components in maintenance section."
- "Corrected torque specifications for wheel lug nuts based on manufacturer update."
- "Reorganized troubleshooting steps for improved clarity and logical flow."
- "Modified procedural steps to align with current regulatory requirements."

Generate ONLY the revision comment text (no quotes, no additional formatting):"""


def clean_ai_comment(response: str) -> str:
    """Normalize a model reply into a single-sentence revision comment.

    Strips surrounding quotes and 'Revision comment:'/'Comment:' prefixes,
    keeps the first line, truncates long replies and ensures terminal
    punctuation. An empty result becomes DEFAULT_COMMENT.
    """
    comment = (response or "").strip()
    comment = _SURROUNDING_QUOTES.sub("", comment)
    comment = _REVISION_PREFIX.sub("", comment)
    comment = _COMMENT_PREFIX.sub("", comment)
    comment = comment.split("\n")[0]

    if len(comment) > MAX_COMMENT_LENGTH:
        comment = comment[:MAX_COMMENT_LENGTH - 3] + "..."

    if comment and not comment.endswith((".", "!", "?")):
        comment += "."

    return comment or DEFAULT_COMMENT


def fallback_comment(analysis: str) -> str:
    """Pick a canned comment from keywords found in the change analysis."""
    lowered = (analysis or "").lower()
    for keywords, require_all, comment in _FALLBACK_RULES:
        found = [keyword in lowered for keyword in keywords]
        if (all(found) if require_all else any(found)):
            return comment
    return DEFAULT_COMMENT

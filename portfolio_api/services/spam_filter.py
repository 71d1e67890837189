"""
Spam heuristics for contact submissions.

Runs only on validated submissions. Any single heuristic is enough to
classify a submission as spam; there is no scoring.
"""
import re
from enum import Enum
from typing import Optional

from portfolio_api.schemas.contact import ContactSubmission

SPAM_KEYWORDS: tuple[str, ...] = (
    "viagra",
    "casino",
    "lottery",
    "winner",
    "congratulations",
    "click here",
    "free money",
)
MAX_LINKS = 3

LINK_PATTERN = re.compile(r"https?://")
# One character followed by ten or more copies of itself
REPEATED_CHAR_PATTERN = re.compile(r"(.)\1{10,}")


class SpamReason(str, Enum):
    """Which heuristic flagged a submission."""

    HONEYPOT = "honeypot"
    KEYWORD = "keyword"
    EXCESSIVE_LINKS = "excessive_links"
    REPEATED_CHARACTERS = "repeated_characters"


class SpamFilter:
    """Honeypot, keyword, link-count and repeated-character checks."""

    def __init__(
        self,
        keywords: tuple[str, ...] = SPAM_KEYWORDS,
        max_links: int = MAX_LINKS,
    ):
        self.keywords = tuple(k.lower() for k in keywords)
        self.max_links = max_links

    def classify(self, submission: ContactSubmission) -> Optional[SpamReason]:
        """Return the first heuristic that fires, or None for a clean submission."""
        # Honeypot short-circuits everything else
        if submission.website and submission.website.strip():
            return SpamReason.HONEYPOT

        text = submission.message.lower()
        if any(keyword in text for keyword in self.keywords):
            return SpamReason.KEYWORD

        if len(LINK_PATTERN.findall(submission.message)) > self.max_links:
            return SpamReason.EXCESSIVE_LINKS

        if REPEATED_CHAR_PATTERN.search(submission.message):
            return SpamReason.REPEATED_CHARACTERS

        return None

    def is_spam(self, submission: ContactSubmission) -> bool:
        return self.classify(submission) is not None

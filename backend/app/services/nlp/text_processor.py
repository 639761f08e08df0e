"""
ThreatLens Text Processor

Text normalization, regex entity extraction, n-gram feature extraction
and keyword-based risk indicators for short messages.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from app.models.prediction import ExtractedEntities, RiskIndicators
from app.utils.constants import (
    URL_PATTERN,
    IPV4_PATTERN,
    DATE_TIME_PATTERN,
    TOOL_PATTERNS,
    FEATURE_THREAT_KEYWORDS,
    HIGH_RISK_KEYWORDS,
    MEDIUM_RISK_KEYWORDS,
    TOOL_KEYWORDS,
    URGENCY_PATTERN,
    COMMERCIAL_PATTERN,
    MIN_FEATURE_TOKEN_LENGTH,
)

logger = logging.getLogger(__name__)


WHITESPACE_RE = re.compile(r'\s+')
# Keeps word characters, whitespace and . ! ? @ - _
DISALLOWED_CHARS_RE = re.compile(r'[^\w\s.!?@\-]')

URL_RE = re.compile(URL_PATTERN, re.IGNORECASE)
IPV4_RE = re.compile(IPV4_PATTERN)
DATE_TIME_RE = re.compile(DATE_TIME_PATTERN, re.IGNORECASE)
TOOL_RES = [re.compile(pattern, re.IGNORECASE) for pattern in TOOL_PATTERNS]
URGENCY_RE = re.compile(URGENCY_PATTERN, re.IGNORECASE)
COMMERCIAL_RE = re.compile(COMMERCIAL_PATTERN, re.IGNORECASE)


@dataclass(frozen=True)
class ProcessedText:
    """Everything the detector derives from raw text before classification."""
    cleaned: str
    features: List[str]
    entities: ExtractedEntities


def _unique(items: Iterable[str]) -> List[str]:
    """Deduplicate preserving first-seen order."""
    return list(dict.fromkeys(items))


def count_occurrences(text: str, keyword: str) -> int:
    """
    Count non-overlapping occurrences of keyword in text.

    Overlapping matches are undercounted: "ddosddos" holds two "ddos" but
    "aaa" holds one "aa".
    """
    if not keyword:
        return 0
    return text.count(keyword)


def normalize_text(text: Optional[str]) -> str:
    """
    Normalize text for keyword matching.

    Lowercases, collapses whitespace runs, replaces non-essential
    punctuation with spaces and trims. Punctuation replaced after the
    collapse can leave double spaces behind.

    Args:
        text: Raw message text

    Returns:
        Normalized text, empty string for empty input
    """
    if not text:
        return ''

    cleaned = text.lower()
    cleaned = WHITESPACE_RE.sub(' ', cleaned)
    cleaned = DISALLOWED_CHARS_RE.sub(' ', cleaned)
    return cleaned.strip()


def extract_features(text: Optional[str]) -> List[str]:
    """
    Extract unigram, bigram and threat-keyword features.

    Order is all unigrams, then all bigrams, then THREAT_<WORD> flags.

    Args:
        text: Raw message text

    Returns:
        Feature strings (not deduplicated)
    """
    cleaned = normalize_text(text)
    words = [w for w in cleaned.split() if len(w) >= MIN_FEATURE_TOKEN_LENGTH]

    features: List[str] = list(words)

    for first, second in zip(words, words[1:]):
        features.append(f"{first}_{second}")

    for keyword in FEATURE_THREAT_KEYWORDS:
        if keyword in cleaned:
            features.append(f"THREAT_{keyword.upper()}")

    return features


def extract_entities(text: Optional[str]) -> ExtractedEntities:
    """
    Extract targets, dates, tools, URLs and IPs from raw text.

    Domains are reported both as URLs and as targets.

    Args:
        text: Raw (not normalized) message text

    Returns:
        ExtractedEntities with ordered, deduplicated lists
    """
    if not text:
        return ExtractedEntities()

    urls = _unique(match.group(0) for match in URL_RE.finditer(text))
    ips = _unique(IPV4_RE.findall(text))
    dates = _unique(match.group(0) for match in DATE_TIME_RE.finditer(text))

    tools: List[str] = []
    for pattern in TOOL_RES:
        tools.extend(match.group(0) for match in pattern.finditer(text))

    return ExtractedEntities(
        targets=list(urls),
        dates=dates,
        tools=_unique(tool.lower() for tool in tools),
        urls=urls,
        ips=ips,
    )


def calculate_risk_indicators(text: Optional[str]) -> RiskIndicators:
    """
    Count risk keywords and flag urgency and commercial language.

    Keyword counts run on normalized text; the urgency and commercial
    flags run on raw text.

    Args:
        text: Raw message text

    Returns:
        RiskIndicators for the message
    """
    cleaned = normalize_text(text)
    raw = text or ''

    return RiskIndicators(
        high_risk_count=sum(count_occurrences(cleaned, kw) for kw in HIGH_RISK_KEYWORDS),
        medium_risk_count=sum(count_occurrences(cleaned, kw) for kw in MEDIUM_RISK_KEYWORDS),
        tool_count=sum(count_occurrences(cleaned, kw) for kw in TOOL_KEYWORDS),
        urgency_score=1 if URGENCY_RE.search(raw) else 0,
        commercial_score=1 if COMMERCIAL_RE.search(raw) else 0,
    )


def process_text(text: Optional[str]) -> ProcessedText:
    """Run normalization, feature extraction and entity extraction together."""
    return ProcessedText(
        cleaned=normalize_text(text),
        features=extract_features(text),
        entities=extract_entities(text),
    )

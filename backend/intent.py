from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple
from re import Pattern

REPORT_INTENT = "REPORT_INTENT"
WEBSITE_CONCEPT_INTENT = "WEBSITE_CONCEPT_INTENT"
GENERAL_INTENT = "GENERAL_INTENT"
ERROR_INTENT = "ERROR"

# ================= Tables =================
# (phrase, weight). Substring match on the lower-cased message.
REPORT_KEYWORDS: Tuple[Tuple[str, int], ...] = tuple((k, 1) for k in (
    "my site", "my website", "my page", "my report",
    "score", "scores", "grade", "rating",
    "performance", "seo", "ux", "accessibility", "content quality",
    "lcp", "cls", "fcp", "ttfb", "tbt", "fid",
    "largest contentful paint", "cumulative layout shift", "total blocking time",
    "first contentful paint", "time to first byte",
    "issue", "issues", "fix", "fixes", "recommend", "improve", "optimize",
    "health score", "health grade", "risk", "priority",
    "meta tag", "meta description", "h1", "heading",
    "violation", "violations", "a11y",
    "word count", "readability", "flesch",
    "quick win", "long term", "executive summary",
    "this report", "this site", "this website", "this page",
    "analyzed", "audit", "scanned",
    "why is", "how can i", "what should i",
    "image size", "js size", "css size", "request count",
    "broken", "slow", "missing alt",
))

# (regex, weight). Question openers that read like "teach me" rather than "look at mine".
CONCEPT_PATTERNS: Tuple[Tuple[Pattern, int], ...] = (
    (re.compile(r"^what (?:is|are) ", re.I), 3),
    (re.compile(r"^how (?:does|do|is) ", re.I), 3),
    (re.compile(r"^explain ", re.I), 3),
    (re.compile(r"^define ", re.I), 3),
    (re.compile(r"^tell me about ", re.I), 3),
    (re.compile(r"^what does .+ mean", re.I), 3),
    (re.compile(r"^why (?:is|are|does|do) (?!my|this)", re.I), 3),
)

CONCEPT_TERMS: Tuple[Tuple[str, int], ...] = tuple((t, 2) for t in (
    "web vital", "core web vitals", "lighthouse",
    "cdn", "server-side rendering", "ssr", "csr",
    "lazy loading", "code splitting", "tree shaking",
    "minification", "compression", "caching", "cache",
    "responsive design", "mobile first",
    "schema markup", "structured data", "open graph",
    "sitemap", "robots.txt", "canonical",
    "wcag", "aria", "screen reader",
    "dns", "https", "ssl", "tls",
    "framework", "react", "next.js", "vue", "angular",
    "hosting", "deployment", "ci/cd",
))

OWNERSHIP_PRONOUN = re.compile(r"\b(my|this|our|the)\b")
OWNERSHIP_SUBJECT = re.compile(r"\b(site|website|page|report|score|audit|grade)\b")
CWV_ACRONYM = re.compile(r"\b(lcp|cls|fcp|ttfb|tbt|fid)\b", re.I)

OWNERSHIP_WEIGHT = 5
CWV_STRONG_WEIGHT = 3
CWV_WEAK_WEIGHT = 1

# Report modules a question is about; shown in the UI next to the answer.
SOURCE_PATTERNS: Tuple[Tuple[str, Pattern], ...] = (
    ("performance", re.compile(
        r"\b(performance|lcp|cls|fcp|ttfb|tbt|fid|speed|slow|fast|load|js|css|image size|request|web vital)\b")),
    ("seo", re.compile(
        r"\b(seo|search engine|meta|title|description|h1|heading|alt text|sitemap|canonical|index|crawl|link|backlink)\b")),
    ("ux", re.compile(
        r"\b(ux|accessibility|a11y|violation|cta|friction|mobile|viewport|touch|aria|screen reader|wcag)\b")),
    ("content", re.compile(
        r"\b(content|readability|word count|flesch|keyword|intent|depth|quality|text|copy)\b")),
)


@dataclass(frozen=True)
class IntentResult:
    intent: str
    confidence: float


def report_score(text: str, has_report_context: bool = False) -> int:
    """Weighted evidence that the user is asking about their own audit."""
    score = 0
    owned = has_ownership(text)
    if owned:
        score += OWNERSHIP_WEIGHT
    score += sum(w for phrase, w in REPORT_KEYWORDS if phrase in text)
    # a bare metric name is as likely a definition question as a report one
    if CWV_ACRONYM.search(text):
        score += CWV_STRONG_WEIGHT if (has_report_context or owned) else CWV_WEAK_WEIGHT
    return score


def concept_score(text: str) -> int:
    score = sum(w for pat, w in CONCEPT_PATTERNS if pat.search(text))
    score += sum(w for term, w in CONCEPT_TERMS if term in text)
    return score


def has_ownership(text: str) -> bool:
    return bool(OWNERSHIP_PRONOUN.search(text) and OWNERSHIP_SUBJECT.search(text))


def detect_intent(message: str, has_report_context: bool = False) -> IntentResult:
    """
    Keyword/regex intent classifier.

    Returns REPORT_INTENT when the message is about the loaded audit,
    WEBSITE_CONCEPT_INTENT for explanations of web concepts and
    GENERAL_INTENT for everything else (greetings, identity, small talk).
    """
    text = (message or "").lower().strip()

    rscore = report_score(text, has_report_context)
    cscore = concept_score(text)

    if rscore >= 5:
        return IntentResult(REPORT_INTENT, 0.95)
    # definition questions win over a weak report signal
    if cscore >= 3:
        return IntentResult(WEBSITE_CONCEPT_INTENT, 0.9)
    if rscore >= 2:
        if has_report_context:
            return IntentResult(REPORT_INTENT, 0.7)
        return IntentResult(WEBSITE_CONCEPT_INTENT, 0.6)
    return IntentResult(GENERAL_INTENT, 0.5)


def detect_sources(message: str) -> List[str]:
    text = (message or "").lower()
    sources = [name for name, pat in SOURCE_PATTERNS if pat.search(text)]
    return sources or ["overview"]

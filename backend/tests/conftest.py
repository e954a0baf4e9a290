"""
Shared fixtures: an in-memory report store, a recording LLM gateway and a
fully populated audit report.
"""

import copy
from datetime import datetime

import pytest

from llm import LLMGateway
from store import NotFoundError


class FakeStore:
    """Dict-backed stand-in for ReportStore."""

    def __init__(self, reports=None, error=None):
        self.reports = reports or {}
        self.error = error
        self.lookups = []

    def find_by_id(self, report_id):
        self.lookups.append(report_id)
        if self.error:
            raise self.error
        return self.reports.get(report_id)


class RecordingGateway(LLMGateway):
    """Gateway that records every vendor call instead of making it."""

    provider = "gemini"
    key_env = "GEMINI_API_KEY"

    def __init__(self, reply="Here is what I found.", error=None, api_key="test-key"):
        super().__init__(api_key, "test-model")
        self.reply = reply
        self.error = error
        self.calls = []

    def _complete(self, system_instruction, turns, user_prompt):
        self.calls.append({
            "system": system_instruction,
            "turns": turns,
            "prompt": user_prompt,
        })
        if self.error:
            raise self.error
        return self.reply


REPORT_ID = "65f1c0ffee0000000000abcd"

FULL_REPORT = {
    "_id": REPORT_ID,
    "url": "http://example.com",
    "final_url": "https://example.com/",
    "created_at": datetime(2025, 3, 7, 12, 0),
    "aggregator": {
        "website_health_score": 72,
        "health_grade": "C",
        "overall_risk_level": "medium",
        "action_recommendation_flag": "needs_attention",
        "dominant_risk_domains": ["performance", "seo"],
        "module_scores": {"performance": 58, "seo": 81, "ux": 74, "content": 66},
    },
    "modules": {
        "performance": {
            "score": 58,
            "confidence": "high",
            "recommendation_flag": "optimize_assets",
            "metrics": {
                "lcp_s": 4.6, "cls": 0.12, "fcp_s": 2.1, "ttfb_s": 0.9,
                "tbt_ms": 450, "total_js_kb": 820, "total_css_kb": 96,
                "total_images_kb": 2400, "total_requests": 87,
            },
            "dominant_negative_factors": ["large hero image", {"factor": "render-blocking JS"}],
            "issues": [
                {"severity": "high", "description": "LCP above 4s"},
                {"message": "Unminified CSS"},
            ],
            "fixes": [
                {"title": "Compress hero image", "description": "Serve WebP", "priority": 1},
                {"name": "Defer scripts"},
            ],
        },
        "seo": {
            "score": 81,
            "indexability_status": "indexable",
            "crawl_health_indicator": "good",
            "recommendation_flag": "minor_fixes",
            "title_length": 42,
            "meta_description_length": 98,
            "h1_count": 2,
            "images_missing_alt_count": 5,
            "internal_links_count": 31,
            "external_links_count": 4,
            "primary_seo_risks": ["short meta description", "multiple h1"],
        },
        "ux": {
            "score": 74,
            "accessibility_risk_level": "moderate",
            "trust_impact_indicator": "low",
            "recommendation_flag": "review_accessibility",
            "violations_count": 9,
            "violations_by_impact": {"critical": 1, "serious": 3, "moderate": 4, "minor": 1},
            "ctas_count": 6,
            "ctas_above_fold": 1,
            "primary_friction_sources": ["low contrast"],
        },
        "content": {
            "score": 66,
            "intent_match_level": "partial",
            "content_depth_status": "adequate",
            "recommendation_flag": "expand_content",
            "word_count": 540,
            "flesch_reading_ease": 57.348,
            "flesch_kincaid_grade": 9.04,
            "keywords": ["audit", {"word": "speed"}, {"term": "seo"}],
            "primary_content_gaps": ["pricing details"],
        },
    },
    "ai_insights": {
        "executiveSummary": "Solid foundation, slow above-the-fold rendering.",
        "topPriorities": [
            {"title": "Fix LCP", "impact": "high", "estimatedROI": "high", "description": "Optimize hero."},
        ],
        "quickWins": ["Add alt text"],
        "longTermGoals": ["Adopt a CDN"],
    },
}


@pytest.fixture
def full_report():
    return copy.deepcopy(FULL_REPORT)


@pytest.fixture
def store(full_report):
    return FakeStore({REPORT_ID: full_report})


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def not_found_store():
    return FakeStore(error=NotFoundError("Report not found"))

"""
Report context builder.

Turns a stored audit report into plain-text sections for the LLM context
window. Raw DB documents are never sent to the model.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from store import NotFoundError

logger = logging.getLogger(__name__)

NA = "N/A"


@dataclass(frozen=True)
class ReportContext:
    full_context: str
    report_summary: str
    url: str


# ================= Public API =================
def build_report_context(store, report_id: str) -> ReportContext:
    """Full context for report questions. Raises NotFoundError."""
    report = store.find_by_id(report_id)
    if not report:
        raise NotFoundError("Report not found")

    modules = report.get("modules") or {}
    chunks = [format_overview(report)]

    if modules.get("performance") is not None:
        chunks.append(format_performance(modules["performance"]))
    if modules.get("seo") is not None:
        chunks.append(format_seo(modules["seo"]))
    if modules.get("ux") is not None:
        chunks.append(format_ux(modules["ux"]))
    if modules.get("content") is not None:
        chunks.append(format_content(modules["content"]))
    if report.get("ai_insights") is not None:
        chunks.append(format_ai_insights(report["ai_insights"]))

    return ReportContext(
        full_context="\n\n".join(chunks),
        report_summary=chunks[0],
        url=_url(report),
    )


def build_report_summary(store, report_id: Optional[str]) -> str:
    """Four-line digest used as optional context for concept questions. Never raises."""
    if not report_id:
        return ""
    try:
        report = store.find_by_id(report_id)
        if not report:
            return ""
        agg = report.get("aggregator") or {}
        scores = agg.get("module_scores") or {}
        return (
            f"[User's website: {_url(report)}]\n"
            f"Health Score: {_v(agg.get('website_health_score'))}/100 (Grade: {_v(agg.get('health_grade'))})\n"
            f"Module Scores — Performance: {_v(scores.get('performance'))}, SEO: {_v(scores.get('seo'))}, "
            f"UX: {_v(scores.get('ux'))}, Content: {_v(scores.get('content'))}\n"
            f"Risk Level: {_v(agg.get('overall_risk_level'))}"
        )
    except Exception as e:
        logger.error("Failed to build report summary for %s: %s", report_id, e)
        return ""


# ================= Value helpers =================
def _v(val: Any, suffix: str = "", default: str = NA) -> str:
    if val is None:
        return default
    if isinstance(val, float) and val.is_integer():
        val = int(val)
    return f"{val}{suffix}"


def _fixed(val: Any) -> str:
    return f"{float(val):.1f}" if val is not None else NA


def _flag(val: Any) -> str:
    return str(val).replace("_", " ") if val is not None else NA


def _url(report: Dict) -> str:
    return report.get("final_url") or report.get("url") or NA


def _date(val: Any) -> str:
    if val is None:
        return NA
    if isinstance(val, str):
        try:
            val = datetime.fromisoformat(val.replace("Z", "+00:00"))
        except ValueError:
            return val
    return f"{val.month}/{val.day}/{val.year}"


def _label(item: Any, *keys: str) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for k in keys:
            if item.get(k):
                return str(item[k])
    return json.dumps(item, default=str)


def _bullets(items: List[Any], *keys: str) -> str:
    return "\n".join(f"  - {_label(i, *keys)}" for i in items)


# ================= Sections =================
def format_overview(report: Dict) -> str:
    agg = report.get("aggregator") or {}
    scores = agg.get("module_scores") or {}
    domains = ", ".join(map(str, agg.get("dominant_risk_domains") or [])) or "None"
    return (
        "## WEBSITE AUDIT OVERVIEW\n"
        f"URL: {_url(report)}\n"
        f"Overall Health Score: {_v(agg.get('website_health_score'))} / 100\n"
        f"Health Grade: {_v(agg.get('health_grade'))}\n"
        f"Overall Risk Level: {_v(agg.get('overall_risk_level'))}\n"
        f"Action Recommendation: {_flag(agg.get('action_recommendation_flag'))}\n"
        f"Dominant Risk Domains: {domains}\n"
        "Module Scores:\n"
        f"  - Performance: {_v(scores.get('performance'))}/100\n"
        f"  - SEO: {_v(scores.get('seo'))}/100\n"
        f"  - UX & Accessibility: {_v(scores.get('ux'))}/100\n"
        f"  - Content Quality: {_v(scores.get('content'))}/100\n"
        f"Analysis Date: {_date(report.get('created_at'))}"
    )


def format_performance(perf: Dict) -> str:
    m = perf.get("metrics") or {}
    text = (
        f"## PERFORMANCE MODULE (Score: {_v(perf.get('score'))}/100)\n"
        f"Confidence: {_v(perf.get('confidence'))}\n"
        f"Recommendation: {_flag(perf.get('recommendation_flag'))}\n"
        "\n"
        "Key Metrics:\n"
        f"  - LCP (Largest Contentful Paint): {_v(m.get('lcp_s'), 's')} (good: <2.5s, bad: >4.0s)\n"
        f"  - CLS (Cumulative Layout Shift): {_v(m.get('cls'))} (good: <0.1, bad: >0.25)\n"
        f"  - FCP (First Contentful Paint): {_v(m.get('fcp_s'), 's')} (good: <1.8s, bad: >3.0s)\n"
        f"  - TTFB (Time to First Byte): {_v(m.get('ttfb_s'), 's')} (good: <0.8s, bad: >1.8s)\n"
        f"  - TBT (Total Blocking Time): {_v(m.get('tbt_ms'), 'ms')} (good: <200ms, bad: >600ms)\n"
        f"  - Total JS Size: {_v(m.get('total_js_kb'), ' KB')}\n"
        f"  - Total CSS Size: {_v(m.get('total_css_kb'), ' KB')}\n"
        f"  - Total Image Size: {_v(m.get('total_images_kb'), ' KB')}\n"
        f"  - Total Requests: {_v(m.get('total_requests'))}"
    )
    factors = perf.get("dominant_negative_factors") or []
    if factors:
        text += "\n\nDominant Negative Factors:\n" + _bullets(factors, "factor", "name")
    return text + format_issues_and_fixes(perf)


def format_seo(seo: Dict) -> str:
    text = (
        f"## SEO MODULE (Score: {_v(seo.get('score'))}/100)\n"
        f"Indexability Status: {_v(seo.get('indexability_status'))}\n"
        f"Crawl Health: {_v(seo.get('crawl_health_indicator'))}\n"
        f"Recommendation: {_flag(seo.get('recommendation_flag'))}\n"
        "\n"
        "Key Metrics:\n"
        f"  - Title Length: {_v(seo.get('title_length'))} chars (ideal: 30-60)\n"
        f"  - Meta Description Length: {_v(seo.get('meta_description_length'))} chars (ideal: 120-160)\n"
        f"  - H1 Count: {_v(seo.get('h1_count'))} (ideal: exactly 1)\n"
        f"  - Images Missing Alt Text: {_v(seo.get('images_missing_alt_count'))}\n"
        f"  - Internal Links: {_v(seo.get('internal_links_count'))}\n"
        f"  - External Links: {_v(seo.get('external_links_count'))}"
    )
    risks = seo.get("primary_seo_risks") or []
    if risks:
        text += f"\nPrimary SEO Risks: {', '.join(map(str, risks))}"
    return text + format_issues_and_fixes(seo)


def format_ux(ux: Dict) -> str:
    by_impact = ux.get("violations_by_impact") or {}
    text = (
        f"## UX & ACCESSIBILITY MODULE (Score: {_v(ux.get('score'))}/100)\n"
        f"Accessibility Risk Level: {_v(ux.get('accessibility_risk_level'))}\n"
        f"Trust Impact: {_v(ux.get('trust_impact_indicator'))}\n"
        f"Recommendation: {_flag(ux.get('recommendation_flag'))}\n"
        "\n"
        "Key Metrics:\n"
        f"  - Total Violations: {_v(ux.get('violations_count'), default='0')}\n"
        f"  - Critical Violations: {_v(by_impact.get('critical'), default='0')}\n"
        f"  - Serious Violations: {_v(by_impact.get('serious'), default='0')}\n"
        f"  - Moderate Violations: {_v(by_impact.get('moderate'), default='0')}\n"
        f"  - Minor Violations: {_v(by_impact.get('minor'), default='0')}\n"
        f"  - Total CTAs: {_v(ux.get('ctas_count'))}\n"
        f"  - CTAs Above Fold: {_v(ux.get('ctas_above_fold'))}"
    )
    friction = ux.get("primary_friction_sources") or []
    if friction:
        text += f"\nFriction Sources: {', '.join(map(str, friction))}"
    return text + format_issues_and_fixes(ux)


def format_content(content: Dict) -> str:
    keywords = content.get("keywords") or []
    text = (
        f"## CONTENT QUALITY MODULE (Score: {_v(content.get('score'))}/100)\n"
        f"Intent Match Level: {_v(content.get('intent_match_level'))}\n"
        f"Content Depth Status: {_v(content.get('content_depth_status'))}\n"
        f"Recommendation: {_flag(content.get('recommendation_flag'))}\n"
        "\n"
        "Key Metrics:\n"
        f"  - Word Count: {_v(content.get('word_count'))} (ideal: >300, good: >800)\n"
        f"  - Flesch Reading Ease: {_fixed(content.get('flesch_reading_ease'))} (higher = easier to read)\n"
        f"  - Flesch-Kincaid Grade Level: {_fixed(content.get('flesch_kincaid_grade'))}\n"
        f"  - Keywords Found: {len(keywords)}"
    )
    gaps = content.get("primary_content_gaps") or []
    if gaps:
        text += f"\nContent Gaps: {', '.join(map(str, gaps))}"
    if keywords:
        top = [_label(k, "word", "term") for k in keywords[:8]]
        text += f"\nTop Keywords: {', '.join(top)}"
    return text + format_issues_and_fixes(content)


def format_ai_insights(insights: Dict) -> str:
    text = "## AI STRATEGIC INSIGHTS"

    if insights.get("executiveSummary"):
        text += f"\nExecutive Summary: {insights['executiveSummary']}"

    priorities = insights.get("topPriorities") or []
    if priorities:
        text += "\n\nTop Priorities:"
        for i, p in enumerate(priorities, 1):
            text += (
                f"\n  {i}. {p.get('title') or 'Priority'} "
                f"(Impact: {p.get('impact') or NA}, ROI: {p.get('estimatedROI') or NA})"
            )
            if p.get("description"):
                text += f"\n     {p['description']}"

    if insights.get("quickWins"):
        text += "\n\nQuick Wins:\n" + _bullets(insights["quickWins"])
    if insights.get("longTermGoals"):
        text += "\n\nLong Term Goals:\n" + _bullets(insights["longTermGoals"])
    return text


def format_issues_and_fixes(module: Dict) -> str:
    text = ""

    issues = module.get("issues") or []
    if issues:
        text += f"\n\nIssues Found ({len(issues)}):"
        for i, issue in enumerate(issues, 1):
            sev = (issue.get("severity") if isinstance(issue, dict) else None) or "info"
            desc = _label(issue, "description", "message")
            text += f"\n  {i}. [{str(sev).upper()}] {desc}"

    fixes = module.get("fixes") or []
    if fixes:
        text += f"\n\nRecommended Fixes ({len(fixes)}):"
        for i, fix in enumerate(fixes, 1):
            fix = fix if isinstance(fix, dict) else {"title": str(fix)}
            title = fix.get("title") or fix.get("name") or "Fix"
            desc = fix.get("description") or ""
            prio = f"[P{fix['priority']}] " if fix.get("priority") else ""
            text += f"\n  {i}. {prio}{title}{': ' + desc if desc else ''}"

    return text

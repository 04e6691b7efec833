"""
Page Audit — Streamlit Application
Audits a single page: performance, visibility, security, accessibility and trust.
"""
from __future__ import annotations

import json
from datetime import datetime

import pandas as pd
import streamlit as st

from analyzers.orchestrator import run_audit
from config import DEFAULT_NAVIGATION_TIMEOUT_MS, DEVICE_CHOICES, SCANNER_NAMES
from crawler.browser import NavigationError
from models import AuditConfig, AuditIssue, AuditResult, ScannerToggles, Severity, Suggestion, to_dict
from reporting.exporter import (
    breakdowns_to_df,
    issues_summary_df,
    issues_to_df,
    result_issues_df,
    scores_df,
    suggestions_to_df,
    to_csv_bytes,
)
from reporting.summary import collect_all_issues
from scoring.scorer import score_color, score_label
from ui.charts import (
    breakdown_waterfall,
    category_scores_bar,
    core_web_vitals_bar,
    issues_by_category_bar,
    issues_by_severity_donut,
    overall_score_gauge,
)

# ── Page config ────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Page Audit",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── Custom CSS ─────────────────────────────────────────────────────────────────
st.markdown("""
<style>
.block-container { padding-top: 1rem; }

.metric-card {
    background: #1A1D27;
    border-radius: 10px;
    padding: 1rem 1.2rem;
    margin-bottom: 0.5rem;
    border-left: 4px solid;
}
.metric-card.critical { border-color: #FF4B4B; }
.metric-card.warning  { border-color: #FFA500; }
.metric-card.info     { border-color: #4B9EFF; }
.metric-card.success  { border-color: #00C851; }
.metric-card.neutral  { border-color: #6C63FF; }

.metric-val  { font-size: 2rem; font-weight: 700; margin: 0; }
.metric-lbl  { font-size: 0.8rem; color: #888; text-transform: uppercase; letter-spacing: 0.05em; }

.pill {
    display: inline-block;
    padding: 2px 10px;
    border-radius: 12px;
    font-size: 0.75rem;
    font-weight: 600;
    text-transform: uppercase;
}
.pill.high   { background: #FF4B4B22; color: #FF4B4B; border: 1px solid #FF4B4B55; }
.pill.medium { background: #FFA50022; color: #FFA500; border: 1px solid #FFA50055; }
.pill.low    { background: #4B9EFF22; color: #4B9EFF; border: 1px solid #4B9EFF55; }

.modebar { display: none !important; }

.sidebar-logo { font-size: 1.5rem; font-weight: 800; color: #6C63FF; margin-bottom: 0.5rem; }
</style>
""", unsafe_allow_html=True)


# ── State helpers ──────────────────────────────────────────────────────────────

def _clear_results():
    for key in ["audit_result", "audit_running"]:
        st.session_state.pop(key, None)


def _has_result() -> bool:
    return "audit_result" in st.session_state and st.session_state.audit_result is not None


# ── Sidebar ────────────────────────────────────────────────────────────────────

def render_sidebar() -> AuditConfig | None:
    with st.sidebar:
        st.markdown('<div class="sidebar-logo">🔍 Page Audit</div>', unsafe_allow_html=True)
        st.caption("Single-page website audit")
        st.divider()

        st.subheader("Target")
        url = st.text_input(
            "Page URL",
            placeholder="example.com",
            help="https:// is added when no scheme is given; http:// is tried if https fails",
        )

        st.subheader("Settings")
        timeout_s = st.slider("Page load timeout (s)", 10, 120, DEFAULT_NAVIGATION_TIMEOUT_MS // 1000, 5)
        device = st.selectbox("Screenshots", DEVICE_CHOICES, index=DEVICE_CHOICES.index("both"))
        deep = st.toggle("Check every link", value=False, help="Lift the cap on broken-link checks")

        st.subheader("Scanners")
        toggles = {name: st.toggle(name.capitalize(), value=True) for name in SCANNER_NAMES}

        st.divider()

        if _has_result():
            if st.button("🔄 New Audit", type="primary", use_container_width=True):
                _clear_results()
                st.rerun()
            st.divider()

        start = st.button("Start Audit", type="primary", use_container_width=True)

        if not _has_result():
            st.divider()
            st.caption("Enter a URL and click **Start Audit**.")

    if start and url.strip():
        return AuditConfig(
            url=url,
            timeout=timeout_s * 1000,
            device=device,
            deep=deep,
            scanners=ScannerToggles(**toggles),
        )

    return None


# ── Run audit ──────────────────────────────────────────────────────────────────

def run_page_audit(config: AuditConfig) -> None:
    progress_bar = st.progress(0)
    status_text = st.empty()

    def on_progress(pct: int, message: str):
        progress_bar.progress(min(pct, 100))
        status_text.markdown(f"**{message}**")

    with st.status("Running audit…", expanded=True) as status_widget:
        st.write(f"Auditing **{config.url}**…")

        try:
            result = run_audit(config, on_progress=on_progress)
        except NavigationError as exc:
            status_widget.update(label="Page could not be loaded", state="error")
            st.error(str(exc))
            return
        except Exception as exc:
            status_widget.update(label="Audit failed", state="error")
            st.error(f"Audit failed: {exc}")
            return

        st.write(f"Found **{len(collect_all_issues(result.legacy.details))}** issues.")
        status_widget.update(label="Audit complete!", state="complete")

    progress_bar.empty()
    status_text.empty()

    st.session_state.audit_result = result
    st.rerun()


# ── Dashboard: Overview ────────────────────────────────────────────────────────

def render_overview(result: AuditResult) -> None:
    issues = collect_all_issues(result.legacy.details)
    scores = result.new_scores

    n_critical = sum(1 for i in issues if i.severity == Severity.CRITICAL)
    n_warning  = sum(1 for i in issues if i.severity == Severity.WARNING)
    n_info     = sum(1 for i in issues if i.severity == Severity.INFO)

    col_gauge, col_stats = st.columns([1, 2])

    with col_gauge:
        st.plotly_chart(overall_score_gauge(scores.overall), use_container_width=True)
        st.markdown(
            f'<div style="text-align:center;font-size:1.1rem;font-weight:700;'
            f'color:{score_color(scores.overall)}">{score_label(scores.overall)}</div>',
            unsafe_allow_html=True,
        )

    with col_stats:
        c1, c2, c3, c4, c5 = st.columns(5)
        for col, key in zip((c1, c2, c3, c4, c5),
                            ("performance", "visibility", "security", "accessibility", "trust")):
            value = getattr(scores, key)
            _metric_card(col, key.capitalize(), value, _score_class(value))

        c6, c7, c8 = st.columns(3)
        _metric_card(c6, "Critical Issues", n_critical, "critical")
        _metric_card(c7, "Warnings",        n_warning,  "warning")
        _metric_card(c8, "Notices",         n_info,     "info")

    st.divider()
    st.plotly_chart(category_scores_bar(scores), use_container_width=True)

    c_left, c_right = st.columns(2)
    with c_left:
        st.plotly_chart(issues_by_category_bar(issues), use_container_width=True)
    with c_right:
        st.plotly_chart(issues_by_severity_donut(issues), use_container_width=True)

    summary = result.legacy.summary
    st.divider()
    col_top, col_strong = st.columns(2)
    with col_top:
        st.subheader("Top Issues")
        if summary.top_issues:
            _render_issue_table(summary.top_issues)
        else:
            st.success("No issues found!")
    with col_strong:
        st.subheader("Strengths")
        for strength in summary.strengths:
            st.markdown(f"✅ {strength}")


# ── Dashboard: Score breakdowns ───────────────────────────────────────────────

def render_breakdowns(result: AuditResult) -> None:
    bds = result.score_breakdowns
    for key in ("performance", "visibility", "security", "accessibility", "trust"):
        bd = getattr(bds, key)
        with st.expander(f"**{bd.category_label}** — {bd.score}/100", expanded=(key == "performance")):
            st.caption(bd.category_description)
            st.markdown(f"*{bd.weight_explanation}*")
            st.plotly_chart(breakdown_waterfall(bd), use_container_width=True)

            for d in bd.deductions:
                st.markdown(f"🔻 **−{d.points}** {d.reason}: {d.explanation}")
                if d.how_to_fix:
                    st.caption(f"Fix: {d.how_to_fix}")
            for b in bd.bonuses:
                st.markdown(f"🔺 **+{b.points}** {b.reason}: {b.explanation}")
            for tip in bd.tips:
                st.info(tip)


# ── Dashboard: Core Web Vitals ────────────────────────────────────────────────

def render_web_vitals(result: AuditResult) -> None:
    cwv = result.score_breakdowns.performance.core_web_vitals
    if cwv is None:
        st.warning("Lighthouse data is not available for this audit.")
        return

    st.plotly_chart(core_web_vitals_bar(cwv), use_container_width=True)
    c1, c2 = st.columns(2)
    _metric_card(c1, "Passing", cwv.passing_count, "success")
    _metric_card(c2, "Failing", cwv.failing_count, "critical" if cwv.failing_count else "success")

    if cwv.recommendations:
        st.subheader("Recommendations")
        for rec in cwv.recommendations:
            with st.expander(f"{rec.title} ({rec.metric.upper()}, {rec.impact} impact)"):
                st.markdown(rec.description)
                st.markdown(f"**How to fix:** {rec.how_to_fix}")
                if rec.learn_more_url:
                    st.markdown(f"[Learn more]({rec.learn_more_url})")

    if cwv.diagnostic_summaries:
        st.subheader("Diagnostics")
        st.dataframe(
            pd.DataFrame([{"Diagnostic": d.label, "Value": d.value, "Status": d.status or ""}
                          for d in cwv.diagnostic_summaries]),
            use_container_width=True,
        )

    opportunities = result.facts.speed.opportunities
    if opportunities:
        st.subheader("Opportunities")
        st.dataframe(
            pd.DataFrame([{"Opportunity": o.title, "Savings (ms)": o.savings} for o in opportunities]),
            use_container_width=True,
        )


# ── Dashboard: Suggestions ────────────────────────────────────────────────────

def render_suggestions(result: AuditResult) -> None:
    sg = result.suggestions
    sections = [
        ("⚡ Quick Wins",     sg.quick_wins,     "High impact, low effort."),
        ("🎯 Priority Fixes", sg.priority_fixes, "High impact, more effort."),
        ("✨ Nice to Have",   sg.nice_to_have,   "Worth doing when time allows."),
    ]
    for title, items, caption in sections:
        st.subheader(f"{title} ({len(items)})")
        st.caption(caption)
        if not items:
            st.markdown("_Nothing here._")
        for s in items:
            _render_suggestion(s)


def _render_suggestion(s: Suggestion) -> None:
    with st.expander(f"**{s.title}** · {s.category}"):
        st.markdown(
            f'<span class="pill {s.impact}">{s.impact} impact</span> '
            f'<span class="pill {s.effort}">{s.effort} effort</span>',
            unsafe_allow_html=True,
        )
        st.markdown(s.description)
        if s.how_to_fix:
            st.markdown(f"**How to fix:** {s.how_to_fix}")
        if s.score_improvement:
            gains = ", ".join(f"+{g['points']} {g['category']}" for g in s.score_improvement)
            st.caption(f"Estimated gain: {gains}")
        if s.related_fact:
            st.caption(f"Related fact: `{s.related_fact}`")


# ── Dashboard: Facts ──────────────────────────────────────────────────────────

def render_facts(result: AuditResult) -> None:
    facts = to_dict(result.facts)
    for section in ("site", "speed", "content", "presence"):
        with st.expander(section.capitalize(), expanded=(section == "site")):
            st.json(facts[section])


# ── Dashboard: Screenshots ────────────────────────────────────────────────────

def render_screenshots(result: AuditResult) -> None:
    if not result.screenshots:
        st.info("No screenshots were captured.")
        return
    cols = st.columns(len(result.screenshots))
    for col, shot in zip(cols, result.screenshots):
        with col:
            st.markdown(f"**{shot.name.capitalize()}** ({shot.width}×{shot.height})")
            st.image(shot.data, use_container_width=True)


# ── Dashboard: Export ─────────────────────────────────────────────────────────

def render_export(result: AuditResult) -> None:
    st.subheader("Export Data")
    stamp = datetime.now().strftime("%Y%m%d_%H%M")

    df_issues = result_issues_df(result)
    df_suggestions = suggestions_to_df(result.suggestions)
    df_breakdowns = breakdowns_to_df(result.score_breakdowns)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.download_button(
            "Issues (CSV)",
            data=to_csv_bytes(df_issues),
            file_name=f"issues_{stamp}.csv",
            mime="text/csv",
            use_container_width=True,
        )
        st.caption(f"{len(df_issues)} issues")
    with col2:
        st.download_button(
            "Suggestions (CSV)",
            data=to_csv_bytes(df_suggestions),
            file_name=f"suggestions_{stamp}.csv",
            mime="text/csv",
            use_container_width=True,
        )
    with col3:
        st.download_button(
            "Score Breakdowns (CSV)",
            data=to_csv_bytes(df_breakdowns),
            file_name=f"breakdowns_{stamp}.csv",
            mime="text/csv",
            use_container_width=True,
        )
    with col4:
        st.download_button(
            "Full Report (JSON)",
            data=json.dumps(to_dict(result), indent=2).encode("utf-8"),
            file_name=f"report_{stamp}.json",
            mime="application/json",
            use_container_width=True,
        )

    st.divider()
    st.dataframe(scores_df(result), use_container_width=True)
    st.subheader("Issue Summary")
    df_summary = issues_summary_df(collect_all_issues(result.legacy.details))
    if not df_summary.empty:
        st.dataframe(df_summary, use_container_width=True)
    st.subheader("All Issues")
    if not df_issues.empty:
        st.dataframe(df_issues, use_container_width=True, height=600)


# ── Helpers ────────────────────────────────────────────────────────────────────

def _score_class(score: int) -> str:
    if score >= 90:
        return "success"
    if score >= 50:
        return "warning"
    return "critical"


def _metric_card(col, label: str, value, card_class: str = "neutral") -> None:
    with col:
        st.markdown(
            f'<div class="metric-card {card_class}">'
            f'<div class="metric-lbl">{label}</div>'
            f'<div class="metric-val">{value}</div>'
            f'</div>',
            unsafe_allow_html=True,
        )


def _render_issue_table(issues: list[AuditIssue]) -> None:
    if not issues:
        return
    df = issues_to_df(issues)

    st.dataframe(
        df,
        use_container_width=True,
        height=min(600, len(df) * 36 + 60),
        column_config={
            "Severity":       st.column_config.TextColumn("Severity", width="small"),
            "Issue":          st.column_config.TextColumn("Issue", width="medium"),
            "Description":    st.column_config.TextColumn("Description", width="large"),
            "Recommendation": st.column_config.TextColumn("Recommendation", width="large"),
        },
    )


# ── Landing / empty state ──────────────────────────────────────────────────────

def render_landing() -> None:
    st.markdown("""
    <div style="text-align:center; padding: 4rem 2rem;">
        <div style="font-size:4rem">🔍</div>
        <h1 style="font-size:2.5rem; font-weight:800; color:#6C63FF; margin:0.5rem 0">Page Audit</h1>
        <p style="font-size:1.1rem; color:#888; max-width:600px; margin:0 auto 2rem">
            Loads a page in a real browser, measures it with Lighthouse and checks SEO,
            social, security, local presence and reviews. Every score comes with the
            reasons behind it and a list of fixes.
        </p>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3, col4 = st.columns(4)
    _feature_card(col1, "⚡", "Performance", "Core Web Vitals, opportunities and diagnostics")
    _feature_card(col2, "🔎", "Visibility", "Meta tags, headings, links, sitemap and local listings")
    _feature_card(col3, "🔐", "Security", "HTTPS, security headers, mixed content, privacy")
    _feature_card(col4, "⭐", "Trust", "Social profiles, reviews and ratings")


def _feature_card(col, icon: str, title: str, desc: str) -> None:
    with col:
        st.markdown(
            f'<div class="metric-card neutral" style="text-align:center">'
            f'<div style="font-size:2rem">{icon}</div>'
            f'<div style="font-weight:700;margin:0.5rem 0">{title}</div>'
            f'<div style="font-size:0.85rem;color:#888">{desc}</div>'
            f'</div>',
            unsafe_allow_html=True,
        )


# ── Main ───────────────────────────────────────────────────────────────────────

def main():
    config = render_sidebar()

    if config is not None:
        _clear_results()
        run_page_audit(config)
        return

    if not _has_result():
        render_landing()
        return

    result: AuditResult = st.session_state.audit_result

    n_crit = sum(1 for i in collect_all_issues(result.legacy.details) if i.severity == Severity.CRITICAL)
    st.title(f"Audit: {result.url}")
    st.caption(f"Score: **{result.new_scores.overall}/100** · {n_crit} critical issue(s)")

    tab_names = ["Overview", "Score Breakdowns", "Core Web Vitals", "Suggestions",
                 "Facts", "Screenshots", "Export"]
    tabs = st.tabs(tab_names)

    with tabs[0]:
        render_overview(result)
    with tabs[1]:
        render_breakdowns(result)
    with tabs[2]:
        render_web_vitals(result)
    with tabs[3]:
        render_suggestions(result)
    with tabs[4]:
        render_facts(result)
    with tabs[5]:
        render_screenshots(result)
    with tabs[6]:
        render_export(result)


if __name__ == "__main__":
    main()

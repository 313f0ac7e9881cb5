"""
app.py
======
Credit Analysis Workbench, Main Streamlit Application

Tabs:
  1. Form II  - Operating Statement (data entry)
  2. Form III - Balance Sheet (data entry)
  3. Output   - derived credit-analysis metrics and trends
"""

from typing import Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from credit_platform.types import BALANCE, OPERATING, StatementType
from credit_platform.aligner import build_row
from credit_platform.errors import TemplateParseError
from credit_platform.export import input_template_csv, section_frames, unlisted_metrics
from credit_platform.formatting import format_metric, metric_row_color
from credit_platform.metrics import DERIVED_METRICS
from credit_platform.parser import parse_statement_file
from credit_platform.schema import STATEMENT_TITLES, get_schema, sections
from credit_platform.session import CreditAnalysisSession

# ─── Page Configuration ───────────────────────────────────────────────────────

st.set_page_config(
    page_title="Credit Analysis Workbench",
    page_icon="🏦",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ─── Custom CSS ───────────────────────────────────────────────────────────────

st.markdown("""
<style>
    .main-header {
        background: linear-gradient(135deg, #1e40af 0%, #3730a3 100%);
        border-radius: 12px;
        padding: 1.2rem 1.5rem;
        color: white;
        margin-bottom: 1.5rem;
    }
    .main-header h1 { margin: 0; font-size: 1.6rem; font-weight: 700; }
    .main-header p  { margin: 0.25rem 0 0; font-size: 0.85rem; opacity: 0.85; }
    .section-title {
        font-size: 0.95rem;
        font-weight: 600;
        color: #1e293b;
        margin: 1rem 0 0.4rem;
        padding-bottom: 0.3rem;
        border-bottom: 1px solid #e2e8f0;
    }
    .section-sub { font-size: 0.75rem; color: #64748b; font-weight: 400; }
    div.stButton > button { border-radius: 8px; font-weight: 500; }
</style>
""", unsafe_allow_html=True)


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _make_plotly_colors() -> List[str]:
    return ["#1e40af", "#3b82f6", "#60a5fa", "#10b981", "#f59e0b",
            "#ef4444", "#6366f1", "#8b5cf6", "#14b8a6", "#64748b"]


def _build_line(
    multi_series: Dict[str, Dict[str, float]],
    years: List[str], title: str, yaxis_title: str = "",
) -> go.Figure:
    fig = go.Figure()
    palette = _make_plotly_colors()
    for i, (name, series) in enumerate(multi_series.items()):
        if not series:
            continue
        xs = [y for y in years if y in series]
        fig.add_trace(go.Scatter(
            x=xs, y=[series[y] for y in xs],
            name=name, mode="lines+markers",
            line=dict(color=palette[i % len(palette)], width=2.5),
            marker=dict(size=7),
        ))
    fig.update_layout(
        title=dict(text=title, font=dict(size=14, color="#1e293b")),
        yaxis_title=yaxis_title,
        paper_bgcolor="white", plot_bgcolor="#f8fafc",
        margin=dict(l=40, r=20, t=40, b=30),
        height=320, legend=dict(orientation="h", y=-0.2),
        font=dict(family="sans-serif", size=11, color="#64748b"),
        xaxis=dict(gridcolor="#e2e8f0", type="category"), yaxis=dict(gridcolor="#e2e8f0"),
    )
    return fig


def _display_table(frame: pd.DataFrame) -> pd.DataFrame:
    """Metric × year frame → formatted strings, tinted by metric family."""
    rows = []
    for metric, series in frame.iterrows():
        row = {"Particulars": metric}
        for y, v in series.items():
            row[y] = format_metric(metric, None if pd.isna(v) else float(v))
        rows.append(row)
    return pd.DataFrame(rows)


def _tint(row: pd.Series) -> List[str]:
    color = metric_row_color(row["Particulars"])
    return [f"background-color: {color}" if color else ""] * len(row)


def _session() -> CreditAnalysisSession:
    return st.session_state["session"]


# ─── Session State ────────────────────────────────────────────────────────────

def _init_state() -> None:
    defaults = {
        "session": None,
        "editor_version": 0,
        "input_warnings": [],
        "last_message": None,
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v
    if st.session_state["session"] is None:
        st.session_state["session"] = CreditAnalysisSession()


_init_state()


# ─── Sidebar ──────────────────────────────────────────────────────────────────

with st.sidebar:
    st.markdown("""
    <div style='text-align:center; padding:0.5rem 0 1rem;'>
        <span style='font-size:2rem;'>🏦</span><br>
        <strong style='font-size:1rem; color:#1e40af;'>Credit Analysis Workbench</strong><br>
        <span style='font-size:0.72rem; color:#64748b;'>Form II · Form III · Derived ratios</span>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("---")
    st.subheader("📥 Templates")
    session = _session()
    for stmt in (OPERATING, BALANCE):
        st.download_button(
            f"⬇️ {STATEMENT_TITLES[stmt]} template",
            data=input_template_csv(stmt, session.years, session.snapshot.statement(stmt)).encode("utf-8"),
            file_name=f"{stmt.lower()}_template.csv",
            mime="text/csv",
            key=f"template_{stmt}",
            width="stretch",
        )

    st.markdown("---")
    st.subheader("📤 Import")
    import_stmt = st.selectbox(
        "Statement", [OPERATING, BALANCE],
        format_func=lambda s: STATEMENT_TITLES[s],
    )
    uploaded = st.file_uploader("Statement template", type=["csv", "xlsx"])
    if uploaded is not None and st.button("Load template", width="stretch"):
        try:
            imported = parse_statement_file(uploaded.getvalue(), uploaded.name, import_stmt, session.config)
        except TemplateParseError as e:
            st.error(f"❌ {uploaded.name}: {e}")
        else:
            outside_years = session.load_statement(import_stmt, imported.data)
            warnings = [f"Unknown line item: {lbl}" for lbl in imported.unknown_labels]
            warnings += imported.rejected_cells + outside_years
            st.session_state["input_warnings"] = warnings
            st.session_state["editor_version"] += 1
            st.session_state["last_message"] = (
                "success", f"Loaded {len(imported.data)} line items from {uploaded.name}")
            st.rerun()


# ─── Main Header ─────────────────────────────────────────────────────────────

st.markdown("""
<div class='main-header'>
    <h1>🏦 Credit Analysis Workbench</h1>
    <p>Operating Statement and Balance Sheet inputs → growth, margin, leverage, coverage and turnover metrics</p>
</div>
""", unsafe_allow_html=True)


# ═══════════════════════════════════════════════════════════════════════════════
# TAB RENDER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════

def _apply_edits(statement: StatementType, before: pd.DataFrame, after: pd.DataFrame) -> List[str]:
    """Push changed cells through the validation gate; return rejection messages."""
    session = _session()
    rejected = []
    for label in after.index:
        for year in after.columns:
            old, new = before.at[label, year], after.at[label, year]
            if (pd.isna(old) and pd.isna(new)) or old == new:
                continue
            raw: Optional[float] = None if pd.isna(new) else float(new)
            check = session.update_cell(statement, label, year, raw)
            if not check.is_valid:
                rejected.append(f"{label} [{year}]: {check.error}")
    return rejected


def _render_statement_form(statement: StatementType) -> None:
    session = _session()
    years = list(session.years)
    data = session.snapshot.statement(statement)
    version = st.session_state["editor_version"]

    st.markdown(f"### 📝 {STATEMENT_TITLES[statement]}")
    st.caption("Amounts in Cr. Percentage lines accept 0–100. Calculated lines are shown read-only below.")

    edits_rejected: List[str] = []
    changed = False
    for section, items in sections(statement):
        inputs = [item for item in items if item.accepts_input]
        if not inputs:
            continue
        with st.expander(section, expanded=False):
            before = pd.DataFrame(
                [[data.get(item.label, {}).get(y) for y in years] for item in inputs],
                index=[item.label for item in inputs], columns=years, dtype=float,
            )
            before.index.name = "Particulars"
            after = st.data_editor(
                before,
                key=f"editor_{statement}_{section}_{version}",
                width="stretch",
                column_config={
                    y: st.column_config.NumberColumn(y, format="%.2f") for y in years
                },
            )
            if not after.equals(before):
                changed = True
                edits_rejected += _apply_edits(statement, before, after)

    computed = [item for item in get_schema(statement) if item.kind == "computed"]
    if computed:
        snap = session.snapshot.statement(statement)
        rows = {y: build_row(snap, y, get_schema(statement)) for y in years}
        calc = pd.DataFrame(
            [[rows[y][item.label] for y in years] for item in computed],
            index=[item.label for item in computed], columns=years,
        )
        calc.index.name = "Calculated line"
        st.markdown("<div class='section-title'>Calculated lines</div>", unsafe_allow_html=True)
        st.dataframe(calc.style.format("{:,.2f}"), width="stretch")

    if changed:
        if edits_rejected:
            st.session_state["input_warnings"] = edits_rejected
            st.session_state["editor_version"] += 1
            st.rerun()


def _render_actions() -> None:
    session = _session()
    c1, c2, c3 = st.columns(3)
    if c1.button("🧮 Calculate Output", type="primary", width="stretch"):
        outcome = session.recompute()
        st.session_state["last_message"] = ("success" if outcome.ok else "error", outcome.message)
    c2.download_button(
        "⬇️ Download CSV",
        data=session.export_csv().encode("utf-8"),
        file_name="credit_analysis_results.csv",
        mime="text/csv",
        disabled=not session.results,
        width="stretch",
    )
    if c3.button("🗑️ Clear Inputs", width="stretch"):
        session.clear()
        st.session_state["input_warnings"] = []
        st.session_state["editor_version"] += 1
        st.session_state["last_message"] = ("info", "All inputs and results cleared.")
        st.rerun()


def _render_output() -> None:
    session = _session()
    results = session.results
    years = list(session.years)
    if not results:
        st.info("Enter data in Form II / Form III and press **Calculate Output**.", icon="🧮")
        return

    st.markdown(f"### 📊 Output  ·  {len(results)} metrics")

    for title, subtitle, frame in section_frames(results, years):
        sub = f" <span class='section-sub'>{subtitle}</span>" if subtitle else ""
        st.markdown(f"<div class='section-title'>{title}{sub}</div>", unsafe_allow_html=True)
        st.dataframe(_display_table(frame).style.apply(_tint, axis=1),
                     hide_index=True, width="stretch")

    extra = unlisted_metrics(results)
    if extra:
        st.markdown("<div class='section-title'>ADDITIONAL METRICS</div>", unsafe_allow_html=True)
        rows = [{"Particulars": m, **{y: format_metric(m, results[m].get(y)) for y in years}} for m in extra]
        st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")

    st.markdown("---")
    st.markdown("#### 📈 Trends")
    picked = st.multiselect(
        "Metrics", list(DERIVED_METRICS),
        default=["Total Operating Income", "EBITDA", "Profit after tax"],
    )
    if picked:
        st.plotly_chart(
            _build_line({m: results.get(m, {}) for m in picked}, years, "Selected metrics"),
            width="stretch",
        )


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN LAYOUT
# ═══════════════════════════════════════════════════════════════════════════════

counts = _session().input_counts()
col_h1, col_h2, col_h3 = st.columns(3)
col_h1.metric("Fiscal years", f"{len(_session().years)} ({_session().years[0]}–{_session().years[-1]})")
col_h2.metric("Form II cells", counts[OPERATING])
col_h3.metric("Form III cells", counts[BALANCE])

_render_actions()

message = st.session_state["last_message"]
if message:
    level, text = message
    {"success": st.success, "error": st.error, "info": st.info}[level](text)

for warning in st.session_state["input_warnings"]:
    st.warning(f"⚠️ {warning}")

st.markdown("---")

tabs = st.tabs([
    "📝 Form II - Operating Statement", "📝 Form III - Balance Sheet", "📊 Output",
])

with tabs[0]:
    _render_statement_form(OPERATING)

with tabs[1]:
    _render_statement_form(BALANCE)

with tabs[2]:
    _render_output()

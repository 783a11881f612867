"""
dashboard.py
------------
Store Sales Forecasting Dashboard.

Tabs:
  1. Forecast             — quarterly or weekly ARIMA forecast with a confidence band
  2. Confidence Intervals — fixed-horizon forecast trained on the full history
  3. Past vs Forecast     — recent weeks stitched to the forecast (when enabled)
  4. History              — weekly sales, distribution, summary statistics

Launch (always from project root):
    streamlit run app/dashboard.py
"""

import sys
from pathlib import Path

# ── Anchor all paths to project root ──────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd
import streamlit as st

from storecast.app.charts import (
    comparison_figure, distribution_figure, forecast_figure,
    history_figure, placeholder_figure, summary_table,
)
from storecast.core.selection import CONFIDENCE_LEVELS, MAX_QUARTERS, WEEKS_PER_QUARTER, ForecastMode, Selection
from storecast.models.arima_model import AutoARIMAForecaster
from storecast.reactive.session import DashboardSession
from storecast.utils.data_loader import DataStore, load_config

# ── Page config ───────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Store Sales Forecast",
    page_icon="🛒",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .metric-card {
        background: linear-gradient(135deg, #1e2130, #2a2d3e);
        border: 1px solid #3d405b;
        border-radius: 12px;
        padding: 1.2rem 1rem;
        text-align: center;
    }
    .metric-value { font-size: 1.9rem; font-weight: 700; color: #4fc3f7; }
    .metric-label { font-size: 0.8rem; color: #9e9e9e; margin-top: 0.25rem; }
    .metric-sub   { font-size: 0.72rem; color: #546e7a; margin-top: 0.1rem; }
    .stSelectbox label, .stSlider label { color: #cfd8dc !important; }
    section[data-testid="stSidebar"] { background: #0d1117; }
</style>
""", unsafe_allow_html=True)


# ── Data helpers ──────────────────────────────────────────────────────────────

@st.cache_data(show_spinner=False)
def get_config() -> dict:
    return load_config(str(PROJECT_ROOT / "configs" / "default.yaml"))


@st.cache_resource(show_spinner=False)
def get_data_store() -> DataStore:
    return DataStore.from_config(get_config())


def get_session(store: DataStore, cfg: dict) -> DashboardSession:
    """One session (graph + selection) per browser session; only the DataStore is shared."""
    if "dashboard_session" not in st.session_state:
        fc = cfg["forecast"]
        oracle = AutoARIMAForecaster(seasonal_period=fc["seasonal_period"], max_order=fc["max_order"])
        st.session_state["dashboard_session"] = DashboardSession(store.records, oracle, cfg)
    return st.session_state["dashboard_session"]


def show_or_placeholder(session: DashboardSession, node: str):
    """Return the node's value, or draw its placeholder and return None."""
    state = session.state(node)
    if state.error is not None:
        st.plotly_chart(placeholder_figure(state.error.placeholder), use_container_width=True)
        st.caption(f"{type(state.error).__name__}: {state.error}")
        return None
    return state.value


def metric_card(col, value, label, sub):
    with col:
        st.markdown(
            f'<div class="metric-card">'
            f'<div class="metric-value">{value}</div>'
            f'<div class="metric-label">{label}</div>'
            f'<div class="metric-sub">{sub}</div>'
            f'</div>', unsafe_allow_html=True)


def money(x: float) -> str:
    return f"${x / 1e6:.2f}M" if abs(x) >= 1e6 else f"${x:,.0f}"


# ═══════════════════════════════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════════════════════════════
with st.sidebar:
    st.markdown("## 🛒 Store Sales Forecast")
    st.caption("Weekly sales · seasonal ARIMA")
    st.markdown("---")

    with st.spinner("Loading data…"):
        try:
            cfg = get_config()
            data_store = get_data_store()
            data_ok = True
            st.success(f"✅ {len(data_store.stores())} stores · {data_store.last_week()} weeks")
        except (OSError, ValueError) as e:
            st.error(f"Data error:\n{e}"); data_ok = False

    if data_ok:
        session = get_session(data_store, cfg)
        records = data_store.records

        st.markdown("### 🔍 Store")
        store_id = st.selectbox("Store", data_store.stores())
        store_last_week = int(records.loc[records["store_id"] == store_id, "week"].max())

        st.markdown("---")
        st.markdown("### ⚙️ Forecast")
        mode = ForecastMode(st.radio("Forecast by", [m.value for m in ForecastMode], horizontal=True))
        quarter_count, target_week = 1, None
        if mode is ForecastMode.QUARTERLY:
            quarter_count = st.slider("Quarters ahead", 1, MAX_QUARTERS, 1)
        else:
            target_week = int(st.number_input(
                "Forecast up to week", min_value=store_last_week + 1,
                value=store_last_week + WEEKS_PER_QUARTER, step=1,
            ))
        levels = [c for c in cfg["forecast"]["confidence_levels"] if c in CONFIDENCE_LEVELS]
        confidence = st.select_slider("Confidence level (%)", levels, value=cfg["forecast"]["default_confidence"])

        st.markdown("---")
        st.markdown("### 🔀 Comparison")
        compare = st.checkbox("Compare past vs forecast", value=False)
        past_weeks = st.slider("Past weeks", 4, 104, cfg["comparison"]["past_weeks"], disabled=not compare)
        future_weeks = st.slider("Forecast weeks", 1, 52, cfg["comparison"]["future_weeks"], disabled=not compare)

        selection = Selection(
            store_id=store_id, mode=mode, quarter_count=quarter_count, target_week=target_week,
            confidence_level=confidence, compare_enabled=compare,
            comparison_past_weeks=past_weeks, comparison_future_weeks=future_weeks,
        )

# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════
st.markdown("# 🛒 Store Sales Forecasting")
st.markdown("Historical weekly sales and an auto-fitted **seasonal ARIMA** forecast per store.")
st.markdown("---")

if not data_ok:
    st.info("👈 Fix the data error in the sidebar."); st.stop()

with st.spinner(f"Fitting models for store {selection.store_id}…"):
    session.update(selection)

series = show_or_placeholder(session, "series")
if series is None:
    st.stop()

# KPI row
holdout = session.state("holdout")
hm = holdout.value if holdout.ok and holdout.value else {}
k1, k2, k3, k4 = st.columns(4)
metric_card(k1, money(series.tail(13).mean()), "Avg Weekly Sales", "last 13 weeks")
metric_card(k2, money(series.sum()), "Total Sales", f"{len(series)} weeks")
metric_card(k3, f"{hm['mape']:.1f}%" if hm else "—", "Holdout MAPE",
            f"last {hm['holdout_weeks']} weeks" if hm else "not available")
metric_card(k4, f"{hm['coverage'] * 100:.0f}%" if hm else "—", "Interval Coverage",
            f"target {selection.confidence_level}%")
st.markdown("")

tab1, tab2, tab3, tab4 = st.tabs(["📈 Forecast", "🎯 Confidence Intervals", "🔀 Past vs Forecast", "📊 History"])

# ─────────────────────────────────────────────────────────────────────────────
with tab1:  # FORECAST
    horizon_label = (f"{selection.quarter_count} quarter(s)" if mode is ForecastMode.QUARTERLY
                     else f"to week {selection.target_week}")
    st.markdown(f"### Store `{selection.store_id}` · {mode.value} forecast · {horizon_label}")
    plan = show_or_placeholder(session, "forecast_plan")
    fc = show_or_placeholder(session, "forecast") if plan is not None else None
    if fc is not None:
        st.plotly_chart(forecast_figure(series, fc, plan.output_weeks, selection.confidence_level),
                        use_container_width=True)
        st.caption(f"Trained on {len(plan.training_series)} weeks "
                   f"({session.training.value} window) · {plan.horizon_length}-week horizon")
        with st.expander("📄 Forecast table"):
            tbl = fc.to_frame(plan.output_weeks)
            st.dataframe(tbl.round(2), use_container_width=True, hide_index=True)
            st.download_button("Download CSV", tbl.to_csv(index=False),
                               file_name=f"forecast_store_{selection.store_id}.csv", mime="text/csv")

# ─────────────────────────────────────────────────────────────────────────────
with tab2:  # CONFIDENCE INTERVALS
    st.markdown(f"### {session.interval_horizon}-week forecast · {selection.confidence_level}% interval")
    iplan = show_or_placeholder(session, "interval_plan")
    ifc = show_or_placeholder(session, "interval_forecast") if iplan is not None else None
    if ifc is not None:
        st.plotly_chart(forecast_figure(series, ifc, iplan.output_weeks, selection.confidence_level),
                        use_container_width=True)
        lower, upper = ifc.band(selection.confidence_level)
        st.caption(f"Mean band width: {money(float((upper - lower).mean()))}")

# ─────────────────────────────────────────────────────────────────────────────
with tab3:  # PAST VS FORECAST
    if not selection.compare_enabled:
        st.info("Enable **Compare past vs forecast** in the sidebar.")
    else:
        st.markdown(f"### Last {selection.comparison_past_weeks} weeks vs next "
                    f"{selection.comparison_future_weeks} weeks")
        comparison = show_or_placeholder(session, "comparison")
        if comparison is not None:
            st.plotly_chart(comparison_figure(comparison), use_container_width=True)
            totals = comparison.groupby("label")["value"].mean()
            st.dataframe(pd.DataFrame({"Segment": totals.index, "Avg weekly sales": totals.values.round(2)}),
                         use_container_width=True, hide_index=True)

# ─────────────────────────────────────────────────────────────────────────────
with tab4:  # HISTORY
    st.plotly_chart(history_figure(series, f"Store {selection.store_id} weekly sales"),
                    use_container_width=True)
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("**Sales Distribution**")
        st.plotly_chart(distribution_figure(series), use_container_width=True)
    with c2:
        st.markdown("**Summary**")
        st.dataframe(summary_table(series).round(2), use_container_width=True, hide_index=True)

# ── Footer ────────────────────────────────────────────────────────────────────
st.markdown("---")
st.markdown(
    "<div style='text-align:center;color:#37474f;font-size:0.78rem'>"
    "Python · pmdarima · statsmodels · Plotly · Streamlit"
    "</div>", unsafe_allow_html=True)

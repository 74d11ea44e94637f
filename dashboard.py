"""
Interactive dashboard for support ticket volume and trend forecasts.

Run with: streamlit run dashboard.py
"""

import html
import io
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import altair as alt
import pandas as pd
import streamlit as st
import streamlit_shadcn_ui as ui

from dataset_store import (
    KeyValueStore,
    clear_dataset,
    get_store,
    load_dataset,
    load_filter_state,
    save_dataset,
    save_filter_state,
    supabase_disabled,
)
from ticket_trends import (
    CORESHACK_TEAM,
    DEFAULT_FORECAST_PERIODS,
    IT_TEAM,
    Dimension,
    FilterSpecification,
    ForecastMethod,
    Granularity,
    Ticket,
    TrendDirection,
    build_entity_trends,
    filter_tickets,
    group_by,
    group_by_period_and_dimension,
    normalize_rows,
    trend_chart_rows,
    unique_values,
    volume_series,
)
from ticket_trends.aggregate import round_half_up
from ticket_trends.periods import parse_timestamp
from ticket_trends.trends import EntityTrend


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
MAX_UPLOAD_BYTES = 2 * 1024 * 1024  # 2MB
MAX_FORECAST_PERIODS = 12

TABLE_COLUMNS = {
    "id": "ID",
    "created_date": "Created Date",
    "group": "Team",
    "agent_name": "Agent",
    "category": "Category",
    "subject": "Subject",
    "source": "Source",
    "priority": "Priority",
    "status": "Status",
}

FILTER_WIDGETS = {
    "groups": "filter_groups",
    "categories": "filter_categories",
    "agents": "filter_agents",
    "sources": "filter_sources",
    "priorities": "filter_priorities",
}
DATE_WIDGET = "filter_date_range"
DATE_DEFAULT = "filter_date_default"

CHART_CATEGORY_COLORS = [
    "#d8c8ff",
    "#bba0ff",
    "#9c7cff",
    "#7b57ff",
    "#5c3ced",
    "#4327be",
]
CHART_AXIS_LABEL_COLOR = "rgba(226, 220, 255, 0.78)"
CHART_AXIS_TITLE_COLOR = "rgba(201, 189, 255, 0.82)"
CHART_GRID_COLOR = "rgba(132, 110, 238, 0.22)"
CHART_DOMAIN_COLOR = "rgba(164, 142, 255, 0.45)"
CHART_VIEW_FILL = "rgba(18, 12, 42, 0.78)"

TREND_COLORS = {
    TrendDirection.INCREASING: "#70ffc4",
    TrendDirection.DECREASING: "#ff8fae",
    TrendDirection.STABLE: "rgba(226, 220, 255, 0.78)",
}


def _apply_chart_theme(
    chart: alt.Chart, *, title: str, height: int = 300, view_fill: bool = True
) -> alt.Chart:
    return (
        chart.properties(title=title, height=height, background="transparent")
        .configure_view(
            fill=CHART_VIEW_FILL if view_fill else "transparent",
            stroke=None,
        )
        .configure_axis(
            labelColor=CHART_AXIS_LABEL_COLOR,
            titleColor=CHART_AXIS_TITLE_COLOR,
            gridColor=CHART_GRID_COLOR,
            tickColor=CHART_DOMAIN_COLOR,
            domainColor=CHART_DOMAIN_COLOR,
        )
        .configure_title(
            color="#f2eeff",
            font="Inter",
            fontSize=16,
            anchor="start",
            fontWeight=600,
        )
        .configure_legend(
            labelColor=CHART_AXIS_LABEL_COLOR,
            titleColor=CHART_AXIS_TITLE_COLOR,
            orient="top",
            direction="horizontal",
        )
    )


def _inject_theme() -> None:
    st.markdown(
        """
        <style>
            .stApp {
                background: radial-gradient(120% 120% at 0% 0%, rgba(149, 110, 255, 0.16), transparent 45%),
                            linear-gradient(180deg, #060313 0%, #0d0720 55%, #120b2b 100%);
                color: #f4f1ff;
                font-family: 'Inter', sans-serif;
            }

            .stApp [data-testid="stToolbar"] {
                display: none;
            }

            [data-testid="stSidebar"] {
                background: linear-gradient(200deg, rgba(33, 22, 78, 0.98) 0%, rgba(15, 10, 40, 0.98) 100%);
                border-right: 1px solid rgba(146, 119, 255, 0.45);
            }

            .section-title {
                font-size: 1.35rem;
                margin: 2.2rem 0 1rem;
                color: #f1edff;
            }

            .sidebar-section-title {
                font-weight: 600;
                font-size: 0.78rem;
                letter-spacing: 0.18em;
                text-transform: uppercase;
                color: rgba(204, 195, 255, 0.8);
                margin-bottom: 0.75rem;
            }

            .hero-wrapper {
                background: linear-gradient(135deg, rgba(33, 21, 79, 0.85), rgba(14, 7, 36, 0.92));
                border: 1px solid rgba(132, 111, 255, 0.35);
                border-radius: 28px;
                padding: 2.2rem 2.5rem;
                margin-bottom: 2rem;
            }

            .hero-wrapper h1 {
                font-size: 2.1rem;
                margin: 0 0 0.5rem;
                color: #ffffff;
            }

            .hero-wrapper p {
                margin: 0;
                color: rgba(235, 231, 255, 0.85);
            }

            .metric-grid {
                display: grid;
                grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
                gap: 1.2rem;
            }

            .metric-card, .stat-card, .dataset-card {
                border-radius: 22px;
                padding: 1.3rem 1.5rem;
                background: rgba(19, 14, 44, 0.9);
                border: 1px solid rgba(116, 96, 226, 0.4);
            }

            .metric-value {
                font-size: 1.8rem;
                font-weight: 700;
                color: #f9f8ff;
            }

            .metric-label, .stat-label {
                font-size: 0.8rem;
                letter-spacing: 0.08em;
                text-transform: uppercase;
                color: rgba(215, 205, 255, 0.75);
            }

            .metric-caption, .dataset-meta {
                margin-top: 0.35rem;
                font-size: 0.85rem;
                color: rgba(222, 217, 255, 0.6);
            }

            .stat-card h4 {
                margin: 0 0 0.8rem;
                color: #f6f3ff;
            }

            .stat-row {
                display: flex;
                justify-content: space-between;
                margin-bottom: 0.35rem;
            }

            .insight-card {
                border-radius: 24px;
                padding: 1.6rem 1.8rem;
                background: rgba(17, 12, 42, 0.9);
                border: 1px solid rgba(125, 103, 240, 0.32);
                margin-top: 1.8rem;
            }

            .insight-card ul {
                padding-left: 1.2rem;
                margin: 0;
                color: rgba(226, 221, 255, 0.82);
                line-height: 1.55;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _sanitize_key(*parts: str) -> str:
    safe_parts = []
    for part in parts:
        safe = re.sub(r"[^0-9A-Za-z]+", "_", str(part))
        safe_parts.append(safe.strip("_"))
    return "_".join(safe_parts)


def _trigger_rerun() -> None:
    if hasattr(st, "rerun"):
        st.rerun()
    else:
        st.experimental_rerun()


def _session_store() -> KeyValueStore:
    # The in-memory fallback only survives reruns if it lives in the session.
    if "dataset_store" not in st.session_state:
        st.session_state["dataset_store"] = get_store()
    return st.session_state["dataset_store"]


def _read_csv_rows(data: bytes) -> List[Dict[str, Any]]:
    try:
        frame = pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False)
    except UnicodeDecodeError:
        frame = pd.read_csv(
            io.BytesIO(data), dtype=str, keep_default_na=False, encoding="cp1252"
        )
    frame.columns = [str(col).strip() for col in frame.columns]
    return frame.to_dict("records")


def _load_local_rows(data_dir: Path) -> Tuple[List[str], List[Dict[str, Any]]]:
    names: List[str] = []
    rows: List[Dict[str, Any]] = []
    for csv_path in sorted(data_dir.glob("*.csv")):
        rows.extend(_read_csv_rows(csv_path.read_bytes()))
        names.append(csv_path.name)
    return names, rows


@st.cache_data(show_spinner=True)
def prepare_tickets(rows: List[Dict[str, Any]]) -> List[Ticket]:
    return normalize_rows(rows)


@dataclass
class DatasetLoadResult:
    tickets: List[Ticket]
    name: str
    source: str
    uploaded_at: Optional[str] = None
    errors: List[str] = field(default_factory=list)


def load_dataset_bundle(store: KeyValueStore) -> DatasetLoadResult:
    errors: List[str] = []
    try:
        stored = load_dataset(store)
    except Exception as exc:
        errors.append(str(exc))
        stored = None

    if stored is not None and stored.rows:
        return DatasetLoadResult(
            tickets=prepare_tickets(stored.rows),
            name=stored.name,
            source="stored",
            uploaded_at=stored.uploaded_at,
            errors=errors,
        )

    names, rows = _load_local_rows(DATA_DIR)
    return DatasetLoadResult(
        tickets=prepare_tickets(rows) if rows else [],
        name=", ".join(names) if names else "No dataset",
        source="local" if rows else "empty",
        errors=errors,
    )


def _format_uploaded_at(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed.strftime("%Y-%m-%d %H:%M UTC")
    except ValueError:
        return value


def _render_header(bundle: DatasetLoadResult, filtered: List[Ticket]) -> None:
    total = len(bundle.tickets)
    source_line = {
        "stored": "Uploaded dataset",
        "local": "Bundled sample data",
        "empty": "No data loaded",
    }[bundle.source]
    data_line = (
        f"{len(filtered):,} of {total:,} tickets in view from <strong>{html.escape(bundle.name)}</strong>."
        if total
        else "Upload a ticket CSV export to unlock the dashboard."
    )
    st.markdown(
        f"""
        <div class="hero-wrapper">
            <div class="metric-label">{source_line}</div>
            <h1>Ticket Trends</h1>
            <p>{data_line} Track volume by team and agent and project where it is heading.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def dataset_management_panel(store: KeyValueStore, bundle: DatasetLoadResult) -> None:
    with st.sidebar:
        st.markdown("<div class='sidebar-section-title'>Dataset</div>", unsafe_allow_html=True)

        with st.form("dataset_upload_form", clear_on_submit=True):
            uploader = st.file_uploader(
                "Upload CSV (max 2 MB)",
                type=["csv"],
                accept_multiple_files=False,
                key="dataset_upload_widget",
            )
            submitted = st.form_submit_button("Load dataset")

        if submitted:
            if uploader is None:
                st.warning("Choose a CSV file to upload.")
            else:
                name = uploader.name.strip()
                data_bytes = uploader.getvalue()
                if not name.lower().endswith(".csv"):
                    st.error("Only .csv files are supported.")
                elif len(data_bytes) > MAX_UPLOAD_BYTES:
                    st.error("File exceeds the 2 MB size limit.")
                else:
                    try:
                        rows = _read_csv_rows(data_bytes)
                        save_dataset(store, name, rows)
                    except Exception as exc:
                        st.error(f"Upload failed: {exc}")
                    else:
                        st.success(f"Loaded {len(rows):,} rows from '{name}'.")
                        _reset_filter_widgets()
                        _trigger_rerun()

        if bundle.source == "empty":
            ui.alert(
                title="No dataset yet",
                description="Upload a CSV to start analysing tickets.",
                key="dataset-empty-alert",
            )
            return

        meta_bits = [f"{len(bundle.tickets):,} tickets"]
        uploaded_label = _format_uploaded_at(bundle.uploaded_at)
        if uploaded_label:
            meta_bits.append(uploaded_label)
        st.markdown(
            f"""
            <div class='dataset-card'>
                <h4>{html.escape(bundle.name)}</h4>
                <div class='dataset-meta'>{" &bull; ".join(html.escape(bit) for bit in meta_bits)}</div>
            </div>
            """,
            unsafe_allow_html=True,
        )

        if bundle.source == "stored":
            clear_clicked = ui.button(
                text="Clear dataset",
                variant="destructive",
                class_name="w-full",
                key="dataset-clear",
            )
            if clear_clicked:
                try:
                    clear_dataset(store)
                except Exception as exc:
                    st.sidebar.error(f"Failed to clear dataset: {exc}")
                else:
                    _reset_filter_widgets()
                    _trigger_rerun()


def _reset_filter_widgets() -> None:
    for key in list(FILTER_WIDGETS.values()) + [DATE_WIDGET]:
        st.session_state.pop(key, None)
    st.session_state["filters_restored"] = False


def _date_bounds(tickets: List[Ticket]) -> Optional[Tuple[date, date]]:
    moments = [m for m in (parse_timestamp(t.created_date) for t in tickets) if m]
    if not moments:
        return None
    return min(moments).date(), max(moments).date()


def _team_options(tickets: List[Ticket]) -> List[str]:
    teams = unique_values(tickets, Dimension.GROUP)
    if any(team != CORESHACK_TEAM for team in teams):
        return [IT_TEAM] + [team for team in teams if team != IT_TEAM]
    return teams


def _restore_filter_widgets(
    store: KeyValueStore,
    options: Dict[str, List[str]],
    bounds: Optional[Tuple[date, date]],
) -> None:
    if st.session_state.get("filters_restored"):
        return
    st.session_state["filters_restored"] = True

    try:
        saved = load_filter_state(store)
    except Exception as exc:
        logger.warning("Could not restore filters: %s", exc)
        saved = None
    spec = FilterSpecification.from_dict(saved) if saved else FilterSpecification()

    for attribute, key in FILTER_WIDGETS.items():
        # Selections no longer present in the data would make the widget fail.
        st.session_state[key] = [
            value for value in getattr(spec, attribute) if value in options[attribute]
        ]
    restored_range: Tuple[date, ...] = ()
    if spec.date_range_active and bounds:
        start, end = (bound.date() for bound in spec.date_range)
        if bounds[0] <= start <= end <= bounds[1]:
            restored_range = (start, end)
    st.session_state[DATE_DEFAULT] = restored_range


def build_filters(store: KeyValueStore, tickets: List[Ticket]) -> FilterSpecification:
    st.sidebar.markdown(
        "<div class='sidebar-section-title'>Filters</div>", unsafe_allow_html=True
    )

    options = {
        "groups": _team_options(tickets),
        "categories": unique_values(tickets, Dimension.CATEGORY),
        "agents": unique_values(tickets, Dimension.AGENT),
        "sources": unique_values(tickets, Dimension.SOURCE),
        "priorities": unique_values(tickets, Dimension.PRIORITY),
    }
    bounds = _date_bounds(tickets)
    _restore_filter_widgets(store, options, bounds)

    date_range: Tuple[Optional[datetime], Optional[datetime]] = (None, None)
    if bounds:
        # An empty tuple puts the picker in range mode with nothing selected.
        picked = st.sidebar.date_input(
            "Created date range",
            value=st.session_state.get(DATE_DEFAULT, ()),
            min_value=bounds[0],
            max_value=bounds[1],
            key=DATE_WIDGET,
        )
        if isinstance(picked, (tuple, list)) and len(picked) == 2:
            date_range = (
                datetime.combine(picked[0], time.min),
                datetime.combine(picked[1], time.max),
            )

    labels = {
        "groups": "Team",
        "categories": "Category",
        "agents": "Agent",
        "sources": "Source",
        "priorities": "Priority",
    }
    selections = {
        attribute: tuple(
            st.sidebar.multiselect(labels[attribute], options[attribute], key=key)
        )
        for attribute, key in FILTER_WIDGETS.items()
    }

    spec = FilterSpecification().merge(date_range=date_range, **selections)

    if spec.is_active:
        st.sidebar.caption(f"{spec.active_filter_count} active filter(s)")
        if st.sidebar.button("Reset filters", key="filters-reset"):
            _reset_filter_widgets()
            spec = FilterSpecification()
            _persist_filters(store, spec)
            _trigger_rerun()

    _persist_filters(store, spec)
    return spec


def _persist_filters(store: KeyValueStore, spec: FilterSpecification) -> None:
    state = spec.to_dict()
    if st.session_state.get("persisted_filters") == state:
        return
    try:
        save_filter_state(store, state)
    except Exception as exc:
        st.sidebar.error(f"Failed to save filter settings: {exc}")
        return
    st.session_state["persisted_filters"] = state


def kpi_section(tickets: List[Ticket], filtered: List[Ticket]) -> None:
    share = round_half_up(len(filtered) / len(tickets) * 100) if tickets else 0
    metric_data = [
        ("Tickets in view", f"{len(filtered):,}", f"{share}% of {len(tickets):,} total"),
        ("Teams", f"{len(unique_values(filtered, Dimension.GROUP)):,}", "Distinct groups"),
        ("Categories", f"{len(unique_values(filtered, Dimension.CATEGORY)):,}", "Distinct categories"),
        ("Agents", f"{len(unique_values(filtered, Dimension.AGENT)):,}", "Distinct agents"),
    ]
    cards_html = "".join(
        "<div class='metric-card'>"
        f"<div class='metric-label'>{title}</div>"
        f"<div class='metric-value'>{value}</div>"
        f"<div class='metric-caption'>{caption}</div>"
        "</div>"
        for title, value, caption in metric_data
    )
    st.markdown(f"<div class='metric-grid'>{cards_html}</div>", unsafe_allow_html=True)


def _bucket_frame(tickets: List[Ticket], dimension: Dimension, limit: Optional[int] = None) -> pd.DataFrame:
    buckets = group_by(tickets, dimension)
    if limit:
        buckets = buckets[:limit]
    return pd.DataFrame(
        [{"Label": b.label, "Tickets": b.count, "Share": b.percentage} for b in buckets],
        columns=["Label", "Tickets", "Share"],
    )


def _distribution_chart(data: pd.DataFrame, chart_type: str, *, title: str, axis_title: str):
    base = alt.Chart(data)
    palette = alt.Scale(range=CHART_CATEGORY_COLORS)
    tooltip = [
        alt.Tooltip("Label:N", title=axis_title),
        alt.Tooltip("Tickets:Q"),
        alt.Tooltip("Share:Q", title="Share (%)"),
    ]
    if chart_type == "Pie":
        chart = base.mark_arc(
            innerRadius=45,
            cornerRadius=6,
            stroke="rgba(255,255,255,0.1)",
            strokeWidth=1,
        ).encode(
            theta=alt.Theta("Tickets:Q", stack=True),
            color=alt.Color(
                "Label:N",
                scale=palette,
                legend=alt.Legend(title=None, orient="bottom", labelLimit=160),
            ),
            tooltip=tooltip,
        )
        return _apply_chart_theme(chart, title=f"Ticket share by {axis_title.lower()}", view_fill=False)

    chart = base.mark_bar(
        size=20,
        cornerRadiusTopLeft=8,
        cornerRadiusTopRight=8,
    ).encode(
        x=alt.X("Tickets:Q", title="Tickets"),
        y=alt.Y("Label:N", sort="-x", title=axis_title),
        color=alt.Color("Label:N", scale=palette, legend=None),
        tooltip=tooltip,
    )
    return _apply_chart_theme(chart, title=title)


def _volume_chart(data: pd.DataFrame, chart_type: str, granularity: Granularity):
    base = alt.Chart(data)
    encoding = dict(
        x=alt.X("Period:O", title="Month" if granularity is Granularity.MONTH else "ISO week"),
        y=alt.Y("Tickets:Q", title="Tickets"),
        tooltip=["Period", "Tickets"],
    )
    if chart_type == "Bar":
        chart = base.mark_bar(
            cornerRadiusTopLeft=8,
            cornerRadiusTopRight=8,
            color="#9c7cff",
        ).encode(**encoding)
    elif chart_type == "Area":
        chart = base.mark_area(
            interpolate="monotone",
            color="rgba(164,140,255,0.45)",
            line={"color": "#d9cbff", "size": 2.5},
        ).encode(**encoding)
    else:
        chart = base.mark_line(
            interpolate="monotone",
            color="#dccfff",
            size=2.5,
            point=alt.OverlayMarkDef(size=60, fill="#f8f5ff", stroke="#7a56ff"),
        ).encode(**encoding)
    return _apply_chart_theme(chart, title="Ticket volume")


def build_charts(filtered: List[Ticket]) -> None:
    if not filtered:
        ui.alert(
            title="No records",
            description="Refine or clear filters to visualise tickets.",
            key="charts-empty-alert",
        )
        return

    panels = [
        (Dimension.GROUP, "Tickets by team", "Team", None),
        (Dimension.AGENT, "Tickets by agent", "Agent", 15),
        (Dimension.CATEGORY, "Top categories", "Category", 10),
        (Dimension.PRIORITY, "Tickets by priority", "Priority", None),
        (Dimension.STATUS, "Tickets by status", "Status", None),
    ]
    columns = st.columns(2, gap="large")
    for index, (dimension, title, axis_title, limit) in enumerate(panels):
        with columns[index % 2]:
            chart_type = ui.tabs(
                options=["Bar", "Pie"],
                default_value="Bar",
                key=f"{dimension.value}_chart_type",
            )
            st.altair_chart(
                _distribution_chart(
                    _bucket_frame(filtered, dimension, limit),
                    chart_type,
                    title=title,
                    axis_title=axis_title,
                ),
                use_container_width=True,
            )

    st.markdown("<div class='section-title'>Volume over time</div>", unsafe_allow_html=True)
    control_cols = st.columns(2)
    with control_cols[0]:
        chart_type = st.radio("Trend chart", ["Line", "Bar", "Area"], horizontal=True)
    with control_cols[1]:
        granularity = Granularity(
            st.radio(
                "Volume granularity",
                [Granularity.MONTH.value, Granularity.WEEK.value],
                format_func=lambda value: "Monthly" if value == "month" else "Weekly",
                horizontal=True,
            )
        )
    series = volume_series(filtered, granularity)
    data = pd.DataFrame(
        [{"Period": point.period, "Tickets": point.value} for point in series],
        columns=["Period", "Tickets"],
    )
    st.altair_chart(_volume_chart(data, chart_type, granularity), use_container_width=True)


def _forecast_chart(data: pd.DataFrame):
    chart = (
        alt.Chart(data)
        .mark_line(point=True, strokeWidth=2.5)
        .encode(
            x=alt.X("period:O", title="Period"),
            y=alt.Y("tickets:Q", title="Tickets"),
            color=alt.Color("name:N", scale=alt.Scale(range=CHART_CATEGORY_COLORS[::-1]), title=None),
            strokeDash=alt.StrokeDash(
                "series:N",
                scale=alt.Scale(domain=["Actual", "Forecast"], range=[[1, 0], [6, 4]]),
                title=None,
            ),
            detail="series:N",
            tooltip=[
                alt.Tooltip("name:N", title="Name"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("period:O", title="Period"),
                alt.Tooltip("tickets:Q", title="Tickets"),
            ],
        )
    )
    return _apply_chart_theme(chart, title="Trend forecast", height=360)


def _stat_card(trend: EntityTrend, method: ForecastMethod) -> str:
    result = trend.result
    color = TREND_COLORS[result.trend_direction]
    rows = [
        ("Trend direction", f"<span style='color:{color}'>{result.trend_direction.value}</span>"),
        ("Slope", f"{result.slope:.2f} / period"),
        ("Period growth (actual)", f"{result.period_growth * 100:.2f}%"),
        ("Trend growth (model)", f"{result.trend_growth * 100:.2f}%"),
        ("Next period", f"{max(result.first_forecast_value, 0):,}"),
    ]
    if method is ForecastMethod.LINEAR and result.r2 != 0:
        rows.append(("R²", f"{result.r2 * 100:.1f}%"))
    if len(trend.actual) < 2:
        rows.append(("Note", "Not enough periods for a fit"))
    body = "".join(
        f"<div class='stat-row'><span class='stat-label'>{label}</span><span>{value}</span></div>"
        for label, value in rows
    )
    return f"<div class='stat-card'><h4>{html.escape(trend.name)}</h4>{body}</div>"


def trends_section(filtered: List[Ticket]) -> None:
    controls = st.columns([1, 2, 1, 1, 1])
    with controls[0]:
        scope = st.radio("Scope", ["Agent", "Team"], horizontal=True, key="trend_scope")
    dimension = Dimension.AGENT if scope == "Agent" else Dimension.GROUP
    candidates = (
        _team_options(filtered) if dimension is Dimension.GROUP else unique_values(filtered, dimension)
    )
    with controls[1]:
        names = st.multiselect(
            "Agents" if dimension is Dimension.AGENT else "Teams",
            candidates,
            default=candidates[:1],
            key=_sanitize_key("trend_names", scope),
        )
    with controls[2]:
        granularity = Granularity(
            st.radio(
                "Granularity",
                [Granularity.MONTH.value, Granularity.WEEK.value],
                format_func=lambda value: "Monthly" if value == "month" else "Weekly",
                key="trend_granularity",
            )
        )
    with controls[3]:
        horizon = int(
            st.number_input(
                "Forecast periods",
                min_value=1,
                max_value=MAX_FORECAST_PERIODS,
                value=DEFAULT_FORECAST_PERIODS,
                step=1,
                key="trend_horizon",
            )
        )
    with controls[4]:
        method = ForecastMethod(
            st.radio(
                "Method",
                [ForecastMethod.LINEAR.value, ForecastMethod.EXPONENTIAL.value],
                format_func=lambda value: "Linear regression"
                if value == "linear"
                else "Exponential smoothing",
                key="trend_method",
            )
        )

    if not names:
        st.info("Select at least one agent or team to project.")
        return

    period_counts = group_by_period_and_dimension(filtered, granularity, dimension)
    trends = build_entity_trends(period_counts, names, horizon, method)
    data = pd.DataFrame(trend_chart_rows(trends), columns=["period", "name", "series", "tickets"])
    if data.empty:
        st.info("No dated tickets for the current selection.")
        return

    st.altair_chart(_forecast_chart(data), use_container_width=True)
    method_label = "Linear Regression" if method is ForecastMethod.LINEAR else "Exponential Smoothing"
    st.caption(
        f"Method: {method_label} | Granularity: {granularity.value}ly | Forecast Periods: {horizon}"
    )

    stat_columns = st.columns(min(len(trends), 3))
    for index, trend in enumerate(trends):
        with stat_columns[index % len(stat_columns)]:
            st.markdown(_stat_card(trend, method), unsafe_allow_html=True)


def insights_report(filtered: List[Ticket]) -> None:
    st.markdown("<div class='section-title'>Insights Report</div>", unsafe_allow_html=True)

    total = len(filtered)
    insights = []
    teams = group_by(filtered, Dimension.GROUP)
    if teams:
        top = teams[0]
        insights.append(
            f"<strong>{html.escape(top.label)}</strong> is handling {top.count} of {total} tickets "
            f"({top.percentage}% of workload)."
        )
    categories = group_by(filtered, Dimension.CATEGORY)
    if categories:
        insights.append(
            f"Category <strong>{html.escape(categories[0].label)}</strong> leads with {categories[0].count} tickets."
        )
    monthly = volume_series(filtered, Granularity.MONTH)
    if monthly:
        busiest = max(monthly, key=lambda point: point.value)
        quiet = sum(1 for point in monthly if point.value == 0)
        insights.append(
            f"The busiest month was <strong>{busiest.period}</strong> with {busiest.value} tickets"
            + (f"; {quiet} month(s) had no tickets at all." if quiet else ".")
        )
    if len(monthly) >= 2:
        volume_trend = build_entity_trends(
            {point.period: {"all": point.value} for point in monthly},
            ["all"],
            DEFAULT_FORECAST_PERIODS,
        )[0].result
        insights.append(
            f"Overall monthly volume is <strong>{volume_trend.trend_direction.value.lower()}</strong> "
            f"({volume_trend.slope:+.1f} tickets per month)."
        )

    if not insights:
        insights.append("No insights available yet. Add data to unlock trends.")

    insight_list = "".join(f"<li>{item}</li>" for item in insights)
    st.markdown(
        f"<div class='insight-card'><h4>Key takeaways</h4><ul>{insight_list}</ul></div>",
        unsafe_allow_html=True,
    )


def _ticket_table(tickets: List[Ticket]) -> pd.DataFrame:
    frame = pd.DataFrame([asdict(ticket) for ticket in tickets], columns=list(TABLE_COLUMNS))
    return frame.rename(columns=TABLE_COLUMNS).sort_values("Created Date", ascending=False)


def main():
    st.set_page_config(page_title="Ticket Trends Dashboard", layout="wide")
    _inject_theme()

    store = _session_store()
    bundle = load_dataset_bundle(store)
    dataset_management_panel(store, bundle)

    if supabase_disabled():
        st.sidebar.caption("Supabase disabled; uploads last for this session only.")
    for index, issue in enumerate(bundle.errors, start=1):
        ui.alert(title="Dataset issue", description=issue, key=f"dataset-issue-{index}")

    if not bundle.tickets:
        _render_header(bundle, [])
        ui.alert(
            title="No data to display",
            description="Upload a ticket CSV export from the sidebar.",
            key="no-data-alert",
        )
        return

    spec = build_filters(store, bundle.tickets)
    filtered = filter_tickets(bundle.tickets, spec)

    _render_header(bundle, filtered)

    overview_tab, trends_tab = st.tabs(["Overview", "Trends"])
    with overview_tab:
        st.markdown("<div class='section-title'>Summary</div>", unsafe_allow_html=True)
        kpi_section(bundle.tickets, filtered)

        st.markdown("<div class='section-title'>Ticket Overview</div>", unsafe_allow_html=True)
        build_charts(filtered)

        st.markdown("<div class='section-title'>Ticket Details</div>", unsafe_allow_html=True)
        st.dataframe(_ticket_table(filtered), width="stretch")

        insights_report(filtered)

    with trends_tab:
        st.markdown("<div class='section-title'>Trend Forecast</div>", unsafe_allow_html=True)
        trends_section(filtered)


if __name__ == "__main__":
    main()

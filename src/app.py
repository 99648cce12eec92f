import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import date

from streamlit_calendar import calendar

from streamplan.catalog import DEFAULT_CATALOG
from streamplan.content import check_watchlist_readiness
from streamplan.frames import calendar_events, deferred_frame, monthly_frame, schedule_frame
from streamplan.logs import setup_logging
from streamplan.models import PRIORITY_ORDER, PlannerPrefs, WatchlistEntry
from streamplan.samples import sample_watchlist
from streamplan.scheduler import generate_plan

from prometheus_client import start_http_server, Summary, Counter


setup_logging()

# ✅ Create metric only once
if "PLAN_TIME" not in st.session_state:
    st.session_state.PLAN_TIME = Summary(
        "plan_generation_seconds",
        "Time spent generating a subscription rotation plan",
    )
PLAN_TIME = st.session_state.PLAN_TIME

# ✅ Create outcome counter only once
if "PLAN_OUTCOME" not in st.session_state:
    st.session_state.PLAN_OUTCOME = Counter(
        "plan_outcome_total",
        "Count of generated plans by final rotation state",
        ["status"],  # done / stalled / active (horizon reached)
    )
PLAN_OUTCOME = st.session_state.PLAN_OUTCOME


# ✅ Start metrics server only once
if "metrics_started" not in st.session_state:
    start_http_server(8000)
    st.session_state.metrics_started = True


# Session State Setup
if "watchlist" not in st.session_state:
    st.session_state.watchlist = []   # list[WatchlistEntry]

if "result" not in st.session_state:
    st.session_state.result = None

if "prefs" not in st.session_state:
    st.session_state.prefs = PlannerPrefs()


# Sidebar: Inputs
st.sidebar.title("Streaming Rotation Planner")

all_services = DEFAULT_CATALOG.total_price()
st.sidebar.subheader("Monthly Budget")
budget = st.sidebar.slider("Budget ($/month)", 0.0, float(round(all_services)), 35.0, step=1.0)
st.sidebar.caption(f"All services: ${all_services:.2f}/mo")

st.sidebar.subheader("Viewing Habits")
daily_hours = st.sidebar.number_input("Watch hours per day", 1, 8,
                                      value=st.session_state.prefs.daily_watch_hours)
st.session_state.prefs.daily_watch_hours = int(daily_hours)

# Add Title
st.sidebar.subheader("Add Title")
platform_ids = [p.id for p in DEFAULT_CATALOG]
with st.sidebar.form("title_form"):
    w_title = st.text_input("Title", key="w_title")
    w_kind = st.selectbox("Type", ["series", "movie"])
    w_priority = st.selectbox("Priority", list(PRIORITY_ORDER), index=1)
    w_platforms = st.multiselect("Platforms", platform_ids,
                                 format_func=DEFAULT_CATALOG.label)
    w_episodes = st.number_input("Episodes (series, 0 = unknown)", 0, 500, value=0)
    w_minutes = st.number_input("Total runtime minutes (0 = estimate)", 0, 20000, value=0)
    w_override = st.selectbox("Watch on (override)", ["(any)"] + platform_ids)
    w_defer = st.checkbox("Decide platform later")
    add_title = st.form_submit_button("Add Title")
    if add_title:
        if not w_title:
            st.sidebar.error("Please enter a title.")
        elif w_defer and w_override != "(any)":
            st.sidebar.error("Pick a platform or defer the decision, not both.")
        else:
            st.session_state.watchlist.append(
                WatchlistEntry.create(
                    id=f"w{len(st.session_state.watchlist)}",
                    title=w_title,
                    kind=w_kind,
                    priority=w_priority,
                    platforms=w_platforms,
                    defer=w_defer,
                    override=None if w_override == "(any)" else w_override,
                    total_minutes=int(w_minutes) or None,
                    episode_count=int(w_episodes) or None,
                )
            )

col_a, col_b = st.sidebar.columns(2)
if col_a.button("Load sample"):
    st.session_state.watchlist = sample_watchlist()
    st.session_state.result = None
if col_b.button("Clear"):
    st.session_state.watchlist = []
    st.session_state.result = None


# Main: Watchlist
st.title("Streaming Subscription Plan")

st.markdown("### Watchlist")
if st.session_state.watchlist:
    wdf = pd.DataFrame([{
        "title": e.title,
        "type": e.kind,
        "priority": e.priority,
        "platforms": ", ".join(DEFAULT_CATALOG.label(p) for p in e.effective_platforms) or "-",
        "deferred": e.is_deferred,
    } for e in st.session_state.watchlist])
    st.dataframe(wdf)

    readiness = check_watchlist_readiness(st.session_state.watchlist)
    if not readiness.is_ready:
        st.warning("High-priority titles without a platform: " + ", ".join(
            e.title for e in readiness.high_priority_missing_platform))
    if readiness.pending_decision:
        st.info(f"{len(readiness.pending_decision)} title(s) waiting for a platform decision.")
else:
    st.write("No titles yet.")


if st.button("Generate Plan", disabled=not st.session_state.watchlist):
    with PLAN_TIME.time():
        result = generate_plan(
            watchlist=st.session_state.watchlist,
            budget=budget,
            prefs=st.session_state.prefs,
            start=date.today(),
        )
    PLAN_OUTCOME.labels(status=result.status.value).inc()
    st.session_state.result = result


# Results
result = st.session_state.result
if result is not None:
    st.markdown("## Your Plan")
    st.info(result.explanation)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Months", result.total_months_needed)
    m2.metric("Total cost", f"${sum(m.monthly_cost for m in result.rotation_schedule):.0f}")
    m3.metric("You save", f"${result.estimated_savings:.0f}")
    m4.metric("Coverage", f"{result.coverage_percent}%")

    if result.rotation_schedule and result.rotation_schedule[0].is_budget_constrained:
        st.warning("Budget-constrained: this plan uses most of your monthly budget.")

    months = monthly_frame(result)
    if not months.empty:
        st.markdown("### Month by Month")
        st.dataframe(months)

        fig = px.bar(months, x="month", y="monthly_cost", color="action",
                     labels={"month": "Month", "monthly_cost": "Cost ($)"})
        fig.add_hline(y=budget, line_dash="dash", line_color="red")
        st.plotly_chart(fig, use_container_width=True)

        st.markdown("### Viewing Calendar")
        first = result.rotation_schedule[0]
        cal_options = {
            "initialView": "dayGridMonth",
            "initialDate": f"{first.year}-{first.month_index + 1:02d}-01",
            "firstDay": 1,  # Monday
        }
        calendar(events=calendar_events(result), options=cal_options, key="calendar")

        with st.expander("Scheduled titles"):
            st.dataframe(schedule_frame(result))

    deferred = deferred_frame(result)
    if not deferred.empty:
        st.markdown("### Deferred")
        st.dataframe(deferred)
else:
    st.info("Add some titles and click **Generate Plan** to see your rotation.")

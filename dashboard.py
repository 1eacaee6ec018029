import time

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from capabilities import Status
from config import get_settings
from log import configure_logging
from simulator import ExecutionEngine
from workload import SCENARIOS, generate_workload

settings = get_settings()
configure_logging(settings.log_level, settings.json_logs)

st.set_page_config(
    page_title="NPU Workload Simulator",
    page_icon="⚡",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 2rem;
    }
    .stButton > button {
        width: 100%;
        background-color: #1f77b4;
        color: white;
        border: none;
        border-radius: 0.5rem;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)

st.markdown('<h1 class="main-header">NPU Workload Simulator</h1>', unsafe_allow_html=True)

with st.sidebar:
    st.header("🔧 Configuration")
    scenario = st.selectbox(
        "Workload Type:",
        SCENARIOS,
        index=SCENARIOS.index("mixed"),
        help="Choose the kind of workload to generate"
    )
    num_tasks = st.slider("Number of Tasks", 1, 64, 16)
    seed = st.number_input("Random Seed", value=settings.seed if settings.seed is not None else 42)
    max_workers = st.slider("Worker Threads", 1, 32, min(settings.max_workers or 4, 32))
    time_scale = st.select_slider(
        "Seconds per time unit",
        options=[0.0001, 0.0005, 0.001, 0.002],
        value=0.0005,
        help="How long one execution-time unit takes on a worker"
    )

    st.markdown("---")
    st.markdown("### Workload Scenarios:")
    st.markdown("- **ML training**: tensor kernels with some vector passes")
    st.markdown("- **Data transfer**: memory tasks across every tier")
    st.markdown("- **Synchronization**: barrier/pipeline/wavefront/async tasks")
    st.markdown("- **Mixed**: every task variant")

tasks = generate_workload(scenario, num_tasks=num_tasks, seed=int(seed))
df_tasks = pd.DataFrame([t.to_dict() for t in tasks])

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Tasks", len(tasks))
with col2:
    st.metric("Mean Execution Time", f"{np.mean(df_tasks['execution_time']):.0f}")
with col3:
    st.metric("Total Execution Time", f"{np.sum(df_tasks['execution_time']):,}")

st.subheader("📋 Generated Workload")
st.dataframe(df_tasks, use_container_width=True)

st.subheader("📊 Execution Time by Task Kind")
fig_kind = px.box(df_tasks, x="kind", y="execution_time", points="all",
                  log_y=True, color="kind")
st.plotly_chart(fig_kind, use_container_width=True)

st.subheader("🔍 Factor Breakdown")
selected_id = st.selectbox("Task", [t.task_id for t in tasks])
selected = next(t for t in tasks if t.task_id == selected_id)
breakdown = selected.factor_breakdown()

fig_factors = go.Figure()
fig_factors.add_trace(go.Bar(
    x=[name for name, _ in breakdown],
    y=[value for _, value in breakdown],
    text=[f"{value:.3f}" for _, value in breakdown],
    textposition="auto",
    marker_color="#1f77b4",
))
fig_factors.update_layout(
    title=f"{type(selected).__name__} {selected.task_id}: execution time {selected.execution_time}",
    yaxis_type="log",
    yaxis_title="value (base) / multiplier (factors)",
)
st.plotly_chart(fig_factors, use_container_width=True)

st.subheader("🚀 Run Workload")
if st.button("Start Simulation", type="primary", key="run_btn"):
    engine = ExecutionEngine(max_workers=max_workers,
                             shutdown_timeout=settings.shutdown_timeout,
                             time_scale=time_scale)
    started = time.perf_counter()
    for task in tasks:
        task.execute(engine)

    progress = st.progress(0, text="Running tasks...")
    while engine.running_ids():
        finished = sum(1 for t in tasks if t.status in (Status.COMPLETED, Status.FAILED))
        progress.progress(finished / len(tasks), text=f"Running tasks... {finished}/{len(tasks)}")
        time.sleep(0.05)
    engine.shutdown()
    progress.empty()
    elapsed = time.perf_counter() - started

    df_result = pd.DataFrame([t.to_dict() for t in tasks])
    st.success(f"✅ Workload finished in {elapsed:.2f}s")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Completed", int((df_result["status"] == Status.COMPLETED.value).sum()))
    with col2:
        st.metric("Failed", int((df_result["status"] == Status.FAILED.value).sum()))
    with col3:
        st.metric("Total Power", f"{df_result['power_consumption'].sum():.2f}")

    fig_power = px.scatter(df_result, x="execution_time", y="power_consumption",
                           color="kind", hover_data=["task_id", "priority", "memory_size"])
    st.plotly_chart(fig_power, use_container_width=True)

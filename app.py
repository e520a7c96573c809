from __future__ import annotations
import logging
import streamlit as st
import pandas as pd
from datetime import timedelta

import clock
from calendar_export import tasks_to_ics
from log import setup_logger
from models import CATEGORIES, KINDS, PRIORITIES, Task
from pdf_export import plan_to_pdf
from stats import compute_stats
from storage import load_state, save_state, state_path
from tasks import TaskStore
from timer import SessionTimer, TimerStateError, format_clock


KIND_LABELS = {"input": "Input study", "past-exam": "Past exam", "review": "Review"}
SHEET_LABELS = {"input": "📖 Input sheet", "output": "🔥 Drill sheet"}

st.set_page_config(page_title="Exam Study Planner", page_icon="📚", layout="centered")

logger = logging.getLogger(__name__)


def _ensure_session_state() -> None:
    setup_logger()
    if "store" in st.session_state:
        return

    state = load_state()
    store = TaskStore(state, persist=save_state)
    today = clock.today()
    if not state.tasks:
        created = store.regenerate(state.settings, today)
        logger.info("First run: generated %d tasks", created)
    else:
        store.rollover(today)

    st.session_state.store = store
    # Timer session is per browser session and never persisted
    st.session_state.timer = SessionTimer(store)


def _queue_toast(message: str) -> None:
    st.session_state.toast_message = message


def _flush_toast() -> None:
    message = st.session_state.pop("toast_message", None)
    if message:
        st.toast(message)


def _task_label(t: Task) -> str:
    prefix = "✅ " if t.status == "completed" else ""
    return f"{prefix}{t.title}"


def _render_task_row(store: TaskStore, t: Task, key_prefix: str, show_date: bool = False) -> None:
    timer: SessionTimer = st.session_state.timer
    col_check, col_body, col_edit, col_play = st.columns([1, 8, 1, 1])
    with col_check:
        checked = st.checkbox(
            "done",
            value=t.status == "completed",
            key=f"{key_prefix}_done_{t.id}",
            label_visibility="collapsed",
        )
        if checked != (t.status == "completed"):
            store.toggle_status(t.id)
            st.rerun()
    with col_body:
        st.markdown(f"**{_task_label(t)}**")
        meta = f"{t.category} · {KIND_LABELS.get(t.kind, t.kind)} · ⏱ {t.duration_minutes} min"
        if show_date:
            meta = f"{t.day.isoformat()} · " + meta
        st.caption(meta)
    with col_edit:
        if st.button("✏️", key=f"{key_prefix}_edit_{t.id}", help="Edit task"):
            _task_dialog(t.id)
    with col_play:
        if t.status != "completed" and st.button(
            "▶", key=f"{key_prefix}_play_{t.id}", help="Start timer"
        ):
            timer.start(t.id)
            st.rerun()


@st.dialog("Task")
def _task_dialog(task_id: str | None) -> None:
    store: TaskStore = st.session_state.store
    task = store.find(task_id) if task_id else None

    with st.form("task_form"):
        title = st.text_input("Title", value=task.title if task else "")
        col1, col2 = st.columns(2)
        with col1:
            category = st.selectbox(
                "Category", CATEGORIES,
                index=CATEGORIES.index(task.category) if task else 0,
            )
            kind = st.selectbox(
                "Type", KINDS,
                index=KINDS.index(task.kind) if task else 0,
                format_func=lambda k: KIND_LABELS[k],
            )
        with col2:
            duration = st.number_input(
                "Minutes", min_value=0, max_value=600, step=5,
                value=task.duration_minutes if task else 30,
            )
            day = st.date_input("Date", value=task.day if task else clock.today())
        priority = st.radio(
            "Priority", PRIORITIES, horizontal=True,
            index=PRIORITIES.index(task.priority) if task else 1,
        )
        submitted = st.form_submit_button("Save", type="primary")

    if submitted:
        fields = dict(
            title=title, category=category, kind=kind,
            duration_minutes=int(duration), day=day, priority=priority,
        )
        try:
            if task:
                store.update(task.id, **fields)
            else:
                store.create(**fields)
        except ValueError as e:
            st.warning(str(e))
        else:
            _queue_toast("Task saved.")
            st.rerun()

    if task:
        st.divider()
        if st.checkbox("I want to delete this task"):
            if st.button("Delete task", type="secondary"):
                store.delete(task.id)
                _queue_toast("Task deleted.")
                st.rerun()


@st.fragment(run_every=1)
def _render_timer_clock() -> None:
    timer: SessionTimer = st.session_state.timer
    if timer.session is None:
        return
    st.markdown(f"## ⏱ {format_clock(timer.elapsed_seconds())}")


def render_timer_panel() -> None:
    timer: SessionTimer = st.session_state.timer
    store: TaskStore = st.session_state.store
    if timer.session is None:
        return

    task = store.find(timer.session.task_id)
    with st.container(border=True):
        st.subheader(task.title if task else "Deleted task")
        if task:
            st.caption(KIND_LABELS.get(task.kind, task.kind))
        _render_timer_clock()

        col_toggle, col_stop = st.columns(2)
        toggle_label = "▶ Resume" if timer.state == "paused" else "⏸ Pause"
        if col_toggle.button(toggle_label, use_container_width=True):
            try:
                timer.toggle()
            except TimerStateError as e:
                st.warning(str(e))
            st.rerun()
        if col_stop.button("⏹ Stop", type="primary", use_container_width=True):
            result = timer.stop()
            if result.outcome == "goal_reached" and store.find(result.task_id):
                st.session_state.pending_completion = result.task_id
            _queue_toast(result.message)
            st.rerun()


def render_completion_prompt() -> None:
    task_id = st.session_state.get("pending_completion")
    if not task_id:
        return
    store: TaskStore = st.session_state.store
    task = store.find(task_id)
    if task is None:
        st.session_state.pop("pending_completion", None)
        return
    st.success(f"🎉 Goal reached for “{task.title}”. Mark it as completed?")
    col_yes, col_no = st.columns(2)
    if col_yes.button("Mark completed", type="primary"):
        store.set_status(task_id, "completed")
        st.session_state.pop("pending_completion", None)
        st.rerun()
    if col_no.button("Not yet"):
        st.session_state.pop("pending_completion", None)
        st.rerun()


def render_today(store: TaskStore) -> None:
    today = clock.today()
    settings = store.state.settings
    st.metric("Days until the exam", clock.days_until_exam(settings.exam_date))

    todays = store.filter_by_date(today)
    if not todays:
        st.subheader("Decide today's tasks")
        st.caption("The generated plan starts tomorrow. What will you do today?")
        col_fwd, col_new = st.columns(2)
        if col_fwd.button("📑 Do tomorrow's plan today", type="primary", use_container_width=True):
            result = store.bring_tomorrow_forward(today)
            if result.outcome == "empty":
                st.warning(result.message)
            else:
                _queue_toast(result.message)
                st.rerun()
        if col_new.button("✏️ Create a task", use_container_width=True):
            _task_dialog(None)
        return

    done = len([t for t in todays if t.status == "completed"])
    st.subheader(f"Today's tasks ({done}/{len(todays)})")
    for sheet in ("input", "output"):
        sheet_tasks = store.filter_by_sheet(sheet, todays)
        if not sheet_tasks:
            continue
        st.markdown(f"**{SHEET_LABELS[sheet]}**")
        for t in sheet_tasks:
            _render_task_row(store, t, key_prefix=f"today_{sheet}")

    if st.button("+ Add task"):
        _task_dialog(None)


def render_tasks(store: TaskStore) -> None:
    col_title, col_new = st.columns([3, 1])
    col_title.header("Tasks")
    if col_new.button("+ New task"):
        _task_dialog(None)

    sheet = st.radio(
        "Sheet", ["input", "output"], horizontal=True,
        format_func=lambda s: SHEET_LABELS[s], key="task_sheet",
    )
    pending = store.filter_by_sheet(sheet, store.pending())
    if not pending:
        st.info("No open input tasks." if sheet == "input" else "No open drill tasks.")
        return
    for t in pending[:60]:
        _render_task_row(store, t, key_prefix=f"list_{sheet}", show_date=True)
    if len(pending) > 60:
        st.caption(f"{len(pending) - 60} more tasks later in the plan.")


def render_stats(store: TaskStore) -> None:
    st.header("Study analysis")
    stats = compute_stats(store.logs, store.tasks, clock.today())

    a, b = st.columns(2)
    a.metric("Today", f"{stats.today_minutes} min")
    b.metric("Total", f"{stats.total_hours} h")

    if not stats.by_category:
        st.info("No study sessions logged yet. Start the timer on a task.")
        return

    st.subheader("By category")
    cat_df = pd.DataFrame(
        {"Minutes": list(stats.by_category.values())},
        index=list(stats.by_category.keys()),
    )
    st.bar_chart(cat_df)

    st.subheader("By day")
    day_df = pd.DataFrame(
        {"Minutes": list(stats.by_day.values())},
        index=pd.to_datetime(list(stats.by_day.keys())),
    )
    st.bar_chart(day_df)


def render_settings(store: TaskStore) -> None:
    st.header("Settings")
    settings = store.state.settings

    with st.form("settings_form"):
        exam_date = st.date_input("Exam date", value=settings.exam_date)
        daily = st.slider("Daily target (minutes)", 15, 600, settings.daily_target_minutes, 5)
        start_hour = st.slider("Calendar export start hour", 0, 23, settings.preferred_start_hour)
        st.caption(
            "Saving regenerates the plan. Tasks you created yourself and completed "
            "tasks are kept."
        )
        submitted = st.form_submit_button("Save and regenerate", type="primary")

    if submitted:
        settings.exam_date = exam_date
        settings.daily_target_minutes = int(daily)
        settings.preferred_start_hour = int(start_hour)
        created = store.regenerate(settings, clock.today())
        _queue_toast(f"Plan regenerated: {created} tasks.")
        st.rerun()

    st.divider()
    st.subheader("Exports")
    today = clock.today()
    col_from, col_to = st.columns(2)
    start = col_from.date_input("From", value=today)
    end = col_to.date_input("To", value=today + timedelta(days=6))
    export_tasks = [t for t in store.tasks if start <= t.day <= end]
    if not export_tasks:
        st.info("No tasks in this range.")
    else:
        ics_bytes, ics_warnings = tasks_to_ics(export_tasks, settings)
        st.download_button(
            "Download ICS",
            data=ics_bytes,
            file_name=f"study_plan_{start.isoformat()}.ics",
            mime="text/calendar",
        )
        if ics_warnings:
            st.warning(" | ".join(ics_warnings))
        st.download_button(
            "Download PDF",
            data=plan_to_pdf(export_tasks, settings, start, end),
            file_name=f"study_plan_{start.isoformat()}.pdf",
            mime="application/pdf",
        )
    st.caption(f"Data is stored locally in {state_path()}.")


_ensure_session_state()
store: TaskStore = st.session_state.store

st.title("Exam Study Planner")
_flush_toast()
render_completion_prompt()
render_timer_panel()

with st.sidebar:
    st.header("Navigate")
    pages = ["Today", "Tasks", "Stats", "Settings"]
    page = st.radio("Page", pages, key="nav_page", label_visibility="collapsed")
    st.caption(f"Exam: {store.state.settings.exam_date.isoformat()}")

if page == "Today":
    render_today(store)
elif page == "Tasks":
    render_tasks(store)
elif page == "Stats":
    render_stats(store)
elif page == "Settings":
    render_settings(store)

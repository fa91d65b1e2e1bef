import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import io
import time

import pandas as pd
import streamlit as st

from coursematch.data import sample_dataset
from coursematch.generate import SEED_DEFAULT, generate_dataset
from coursematch.io_utils import (
    DEFAULT_EXPORT_FILENAME, export_dataset_json, load_courses, load_lecturers,
    load_requests, load_rooms, write_assignments,
)
from coursematch.models import Dataset
from coursematch.scheduling.evaluation import analyze_dataset, match_summary
from coursematch.scheduling.matcher import LOAD_MODES, perform_matching
from coursematch.scheduling.validation import check_matching, validate_dataset

# ---------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------
st.set_page_config(page_title="Course Matcher", layout="wide")
st.title("Course Matcher")

PAGES = ["Overview", "Courses", "Requests", "Matcher", "Data Validation"]

# ---------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------
@st.cache_data
def load_uploaded_cached(lecturers_bytes: bytes, rooms_bytes: bytes, courses_bytes: bytes, requests_bytes: bytes):
    return Dataset(
        lecturers=load_lecturers(io.BytesIO(lecturers_bytes)),
        rooms=load_rooms(io.BytesIO(rooms_bytes)),
        courses=load_courses(io.BytesIO(courses_bytes)),
        requests=load_requests(io.BytesIO(requests_bytes)),
    )

@st.cache_data
def generate_cached(n_requests: int, n_courses: int, seed: int):
    return generate_dataset(n_courses=n_courses, n_requests=n_requests, seed=seed)

# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _frame(records) -> pd.DataFrame:
    return pd.DataFrame([r.to_dict() for r in records])

def _issues_frame(issues) -> pd.DataFrame:
    return pd.DataFrame([i.to_dict() for i in issues], columns=["type", "id", "category", "message"])

def course_label(dataset: Dataset, course_id):
    course = dataset.course(course_id) if course_id else None
    return f"{course.code} – {course.name}" if course else "-"

# ---------------------------------------------------------------------
# Sidebar: data source
# ---------------------------------------------------------------------
with st.sidebar:
    page = st.radio("Page", PAGES)
    st.divider()
    source = st.selectbox("Dataset", ["Sample", "Synthetic", "Upload CSVs"])
    dataset = None
    if source == "Sample":
        dataset = sample_dataset()
    elif source == "Synthetic":
        n_req = st.number_input("Requests", 1, 5000, 40, step=10)
        n_courses = st.number_input("Courses", 1, 200, 8)
        seed = st.number_input("Random seed", 0, 10_000, SEED_DEFAULT)
        dataset = generate_cached(int(n_req), int(n_courses), int(seed))
    else:
        files = [st.file_uploader(name, type=["csv"]) for name in
                 ("lecturers.csv", "rooms.csv", "courses.csv", "requests.csv")]
        if all(files):
            try:
                dataset = load_uploaded_cached(*(f.getvalue() for f in files))
            except (KeyError, ValueError) as exc:
                st.error(f"Could not read CSVs: {exc}")

if dataset is None:
    st.info("Upload all four CSV files to continue.")
    st.stop()

validation = validate_dataset(dataset)
analysis = analyze_dataset(dataset, validation)

# ---------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------
if page == "Overview":
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Lecturers", len(dataset.lecturers))
    c2.metric("Rooms", len(dataset.rooms))
    c3.metric("Courses", len(dataset.courses))
    c4.metric("Requests", len(dataset.requests))
    st.subheader("Insights")
    for line in analysis.insights:
        st.markdown(f"- {line}")

elif page == "Courses":
    courses_df = _frame(dataset.courses)
    if not courses_df.empty:
        courses_df["lecturer"] = [
            (dataset.lecturer(c.lecturer_id).name if dataset.lecturer(c.lecturer_id) else "unknown")
            for c in dataset.courses
        ]
        courses_df["requests"] = courses_df["id"].map(analysis.statistics.requests_per_course)
    st.dataframe(courses_df, use_container_width=True)
    st.subheader("Lecturers")
    st.dataframe(_frame(dataset.lecturers), use_container_width=True)
    st.subheader("Rooms")
    st.dataframe(_frame(dataset.rooms), use_container_width=True)

elif page == "Requests":
    periods = ["All"] + dataset.periods_in_use()
    chosen = st.selectbox("Period", periods)
    rows = [
        {
            "student": r.student_name,
            "period": r.period,
            **{f"choice {i}": course_label(dataset, cid) for i, cid in enumerate(r.course_choices, start=1)},
        }
        for r in dataset.requests if chosen == "All" or r.period == chosen
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

elif page == "Matcher":
    load_mode = st.radio("Lecturer load counted per", LOAD_MODES, horizontal=True)
    t0 = time.perf_counter()
    results = perform_matching(dataset, load_mode=load_mode)
    st.caption(f"Matching time: {time.perf_counter() - t0:.3f}s")

    ms = match_summary(results)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total requests", ms.total_students)
    c2.metric("Satisfied", f"{ms.satisfied_students} ({ms.satisfaction_rate:.0f}%)")
    c3.metric("First choice", ms.preference_counts.get(1, 0))
    c4.metric("Unassigned", ms.unassigned_count)

    failed = [name for name, ok in check_matching(dataset, results).items() if not ok]
    if failed:
        st.error(f"Invariant checks failed: {', '.join(failed)}")

    if results:
        period = st.selectbox("Period", list(results.keys()))
        res = results[period]
        st.subheader("Assignments")
        st.dataframe(pd.DataFrame([
            {
                "student": a.student_name,
                "course": course_label(dataset, a.course_id),
                "preference": a.preference,
                "satisfied": a.satisfied,
            }
            for a in res.assignments.values()
        ]), use_container_width=True)
        st.subheader("Courses running")
        st.dataframe(pd.DataFrame([
            {
                "course": course_label(dataset, cid),
                "enrolled": res.course_enrollments.get(cid, 0),
                "room": dataset.room(rid).name if dataset.room(rid) else rid,
            }
            for cid, rid in res.room_assignments.items()
        ]), use_container_width=True)

        buf = io.StringIO()
        write_assignments(buf, results)
        st.download_button("Download assignments.csv", buf.getvalue(), file_name="assignments.csv", mime="text/csv")

else:
    if validation.valid:
        st.success("Dataset is valid.")
    else:
        st.error(f"Dataset has {len(validation.errors)} error(s).")
    st.subheader(f"Errors ({len(validation.errors)})")
    st.dataframe(_issues_frame(validation.errors), use_container_width=True)
    st.subheader(f"Warnings ({len(validation.warnings)})")
    st.dataframe(_issues_frame(validation.warnings), use_container_width=True)
    st.subheader("Statistics")
    stats = analysis.statistics
    st.dataframe(pd.DataFrame({"requests": stats.requests_per_period}), use_container_width=True)
    st.download_button(
        "Export dataset + analysis (JSON)",
        export_dataset_json(dataset, analysis),
        file_name=DEFAULT_EXPORT_FILENAME,
        mime="application/json",
    )

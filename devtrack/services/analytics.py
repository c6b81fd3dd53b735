import io

import matplotlib
matplotlib.use('Agg')
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

from devtrack.constants import TASK_PRIORITIES, TASK_STATUSES

TASK_COLUMNS = [
    "id", "title", "status", "priority", "notes",
    "time_spent", "time_spent_hours", "tags", "created_at",
]


def get_task_dataframe(tasks) -> pd.DataFrame:
    if not tasks:
        return pd.DataFrame(columns=TASK_COLUMNS)

    data = []
    for task in tasks:
        data.append({
            "id": task.id,
            "title": task.title,
            "status": task.status,
            "priority": task.priority,
            "notes": task.notes or "",
            "time_spent": max(task.time_spent or 0, 0),
            "tags": list(task.tags or []),
            "created_at": task.created_at,
        })

    df = pd.DataFrame(data)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["time_spent_hours"] = df["time_spent"] / 3600.0
    return df[TASK_COLUMNS]


def _zero_filled_counts(series: pd.Series, keys) -> dict:
    counts = series.value_counts()
    return {key: int(counts.get(key, 0)) for key in keys}


def summary_stats(df: pd.DataFrame) -> dict:
    total = len(df)
    by_status = _zero_filled_counts(df["status"], TASK_STATUSES)
    total_seconds = int(df["time_spent"].sum()) if total else 0

    tag_counts = df["tags"].explode().dropna().value_counts() if total else pd.Series(dtype=int)
    top_tags = [
        {"tag": tag, "count": int(count)}
        for tag, count in tag_counts.head(5).items()
    ]

    return {
        "total": total,
        "byStatus": by_status,
        "byPriority": _zero_filled_counts(df["priority"], TASK_PRIORITIES),
        "totalTimeSpent": total_seconds,
        "totalHours": round(total_seconds / 3600.0, 2),
        "completionRate": round(by_status["completed"] / total * 100, 2) if total > 0 else 0,
        "topTags": top_tags,
    }


def generate_time_spent_chart(df: pd.DataFrame) -> io.BytesIO | None:
    if df.empty:
        return None

    ordered = df.sort_values("created_at").copy()
    ordered["day"] = ordered["created_at"].dt.strftime("%b %d")
    ordered["position"] = range(len(ordered))

    # Thread-safe plotting using OO API
    fig = Figure(figsize=(10, 5))
    ax = fig.subplots()
    sns.lineplot(data=ordered, x="position", y="time_spent_hours", marker="o", ax=ax)
    ax.set_xticks(range(len(ordered)))
    ax.set_xticklabels(ordered["day"], rotation=45)
    ax.set_title("Time Spent per Task (hours)")
    ax.set_xlabel("Created")
    ax.set_ylabel("Hours")
    ax.set_ylim(bottom=0)

    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    buf.seek(0)
    return buf


def generate_status_chart(df: pd.DataFrame) -> io.BytesIO | None:
    if df.empty:
        return None

    counts = pd.DataFrame(
        list(_zero_filled_counts(df["status"], TASK_STATUSES).items()),
        columns=["status", "count"],
    )

    fig = Figure(figsize=(6, 5))
    ax = fig.subplots()
    sns.barplot(data=counts, x="status", y="count", hue="status", palette="viridis", legend=False, ax=ax)
    ax.set_title("Tasks by Status")
    ax.set_ylabel("Tasks")

    buf = io.BytesIO()
    fig.savefig(buf, format="png")
    buf.seek(0)
    return buf


def generate_csv_report(df: pd.DataFrame) -> str:
    report = df.copy()
    report["tags"] = report["tags"].apply(lambda tags: ";".join(tags) if isinstance(tags, list) else "")
    return report.to_csv(index=False)

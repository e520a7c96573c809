from __future__ import annotations
from datetime import date, datetime
from io import BytesIO
from typing import List
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from clock import days_until_exam
from models import Task, Settings


def plan_to_pdf(
    tasks: List[Task],
    settings: Settings,
    start: date,
    end: date,
) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        leftMargin=40,
        rightMargin=40,
        topMargin=40,
        bottomMargin=40,
    )
    styles = getSampleStyleSheet()
    elems = []

    elems.append(Paragraph(f"Study Plan: {start.isoformat()} - {end.isoformat()}", styles["Title"]))
    elems.append(Spacer(1, 10))
    countdown = days_until_exam(settings.exam_date, datetime.combine(start, datetime.min.time()))
    elems.append(Paragraph(
        f"Exam: {settings.exam_date.isoformat()} ({countdown} days from {start.isoformat()}) "
        f"| Daily target: {settings.daily_target_minutes}m",
        styles["Normal"],
    ))
    elems.append(Spacer(1, 12))

    by_day: dict[date, List[Task]] = {}
    for t in tasks:
        if start <= t.day <= end:
            by_day.setdefault(t.day, []).append(t)

    if not by_day:
        elems.append(Paragraph("No tasks planned in this range.", styles["Normal"]))

    for day in sorted(by_day.keys()):
        elems.append(Paragraph(day.strftime("%A, %Y-%m-%d"), styles["Heading3"]))
        day_tasks = sorted(by_day[day], key=lambda x: (x.kind != "input", x.title.lower()))
        table_data = [["Task", "Category", "Minutes", "Priority", "Done"]]
        total = 0
        for task in day_tasks:
            total += task.duration_minutes
            table_data.append([
                Paragraph(task.title, styles["BodyText"]),
                task.category,
                str(task.duration_minutes),
                task.priority,
                "Yes" if task.status == "completed" else "No",
            ])
        table_data.append(["Total", "", str(total), "", ""])

        table = Table(table_data, hAlign="LEFT", colWidths=[220, 100, 55, 55, 40])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ("BACKGROUND", (0, -1), (-1, -1), colors.whitesmoke),
            ("ALIGN", (2, 1), (2, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        elems.append(table)
        elems.append(Spacer(1, 8))

    doc.build(elems)
    return buf.getvalue()

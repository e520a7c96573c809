from __future__ import annotations
from typing import List, NamedTuple


class Chapter(NamedTuple):
    name: str
    category: str


# Syllabus order for the Applied Information Technology exam. The theory and
# algorithm chapters come last on purpose.
SYLLABUS: List[Chapter] = [
    Chapter("3. Computer Components", "Technology"),
    Chapter("4. System Components", "Technology"),
    Chapter("5. Software and Operating Systems", "Technology"),
    Chapter("6. Databases", "Technology"),
    Chapter("7. Networks", "Technology"),
    Chapter("8. Security", "Technology"),
    Chapter("9. System Development", "Technology"),
    Chapter("10. Project and Service Management", "Management"),
    Chapter("11. Business and System Strategy", "Strategy"),
    Chapter("12. Corporate Activities and Law", "Strategy"),
    Chapter("1. Basic Theory (Discrete and Applied Mathematics)", "Technology"),
    Chapter("2. Algorithms and Programming", "Technology"),
]

DRILL_TITLE = "[Drill] Morning past exam questions"
WRITTEN_DRILL_PREFIX = "Afternoon written drill: "
STUDY_LABEL = "[Study]"
INPUT_PREFIX = STUDY_LABEL + " "

from .aggregator import (
    AttendanceResult,
    SubjectSummary,
    compute_percentage,
    evaluate_attendance,
    summarize,
)

__all__ = [
    "AttendanceResult",
    "SubjectSummary",
    "compute_percentage",
    "evaluate_attendance",
    "summarize",
]

"""Run reporting: summaries of what a render pass created, updated or skipped."""

from appgen.reporter.summary import RunSummary, next_steps, print_report, summarize

__all__ = [
    "RunSummary",
    "summarize",
    "print_report",
    "next_steps",
]

from pr_analyzer.domain.review.prompts.analysis import (
    CONTENT_SECTION,
    DIFF_SECTION,
    FORMAT_DIRECTIVE,
    TRUNCATION_MARKER,
)
from pr_analyzer.domain.review.prompts.comment import (
    COMMENT_HEADER,
    LEDGER_ANCHOR,
    LEDGER_SECTION_CLOSE,
    LEDGER_SECTION_OPEN,
    SUMMARY_TABLE_HEADER,
)

__all__ = [
    "CONTENT_SECTION",
    "DIFF_SECTION",
    "FORMAT_DIRECTIVE",
    "TRUNCATION_MARKER",
    "COMMENT_HEADER",
    "SUMMARY_TABLE_HEADER",
    "LEDGER_ANCHOR",
    "LEDGER_SECTION_OPEN",
    "LEDGER_SECTION_CLOSE",
]

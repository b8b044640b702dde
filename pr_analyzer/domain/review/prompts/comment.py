COMMENT_HEADER = """## Analysis for Pull Request #{pr_number}

### Files Analyzed: {files_analyzed}
### Diffs Analyzed: {diffs_analyzed}
"""

SUMMARY_TABLE_HEADER = """| File | Change | Analyzed |
| --- | --- | --- |"""

# 분석 이력 섹션의 시작 표시, 에이전트 응답에서는 제거됨
LEDGER_ANCHOR = "<!-- pr-analyzer:ledger -->"

LEDGER_SECTION_OPEN = f"""{LEDGER_ANCHOR}
<details>
<summary>Analysis ledger</summary>
"""

LEDGER_SECTION_CLOSE = "</details>"

CONTENT_SECTION = """## Content of Affected Files:

{code_blocks}
Use the files above to provide context on the changes made in this PR.

"""

DIFF_SECTION = """## Relevant Changes to the PR:

{diff_blocks}
The diffs above contain the changes made in the PR.

"""

FORMAT_DIRECTIVE = (
    "Format your response using Markdown, including appropriate headers and "
    "code blocks where relevant."
)

TRUNCATION_MARKER = "\n\n[... prompt truncated to fit the agent input limit ...]"

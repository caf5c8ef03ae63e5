"""Conventional Commits prompt template for commit message generation.

The same rules apply whether the model sees the raw staged diff or the
summary produced for an oversized diff; only the section header differs.
"""

from gitac.config import CommitConfig

# Allowed commit types and their one-line definitions
COMMIT_TYPES = {
    "feat": "new or improved feature work",
    "fix": "fixing bugs or shortcomings",
    "refactor": "internal refactoring that improves quality, is not user-facing, and does not affect program behavior",
    "docs": "documentation",
    "style": "formatting",
    "test": "testing",
    "chore": "maintenance that is not feature-related or user-facing",
}

DIFF_HEADER = "STAGED DIFF:"
SUMMARY_HEADER = "FILE CHANGES SUMMARIZED:"

README_MAX_LINES = 20
README_TRUNCATION_MARKER = "... (truncated)"

COMMIT_PROMPT_INTRO = """You are a Git commit message generator. Analyze the following changes and output ONLY a conventional commit message. Your commit message must summarize the most important and significant changes present. Be as specific as possible within the given constraints; saying 'change maximum character limit to 72' is better than 'update commit message rules'. You may optionally include an extended description of the changes, ONLY if the changes are large or complex. Focus on the changes themselves; do not explain why you chose the type you did.

REQUIRED FORMAT:
type(scope): summary line

optional description
"""

COMMIT_PROMPT_EXAMPLES = """GOOD FIRST-LINE EXAMPLES:
feat(auth): add JWT token validation
fix(parser): handle empty input strings
refactor(config): simplify YAML loading
docs: update installation guide
"""

COMMIT_PROMPT_REQUIREMENTS = """REQUIREMENTS:
- First line of the commit message MUST be concise and under {max_length} characters
- Present tense (add, not added)
- No explanations, reasoning, or headings
- Output ONLY the commit message
- Focus on the most important changes present rather than inconsequential details. Be extremely concise.
- Start immediately with 'type(scope):'
- SCOPE is not a file path/name, but one or two words summarizing the area of code that was changed. If multiple areas are changed, exclude the scope. Scope should be meaningful to a human knowledgeable about the codebase.

GOOD SCOPE EXAMPLES: auth, parser, config, tests, api client
BAD SCOPE EXAMPLES: internal, pkg, deps
- If you include an extended description, it must be specific and concise. Do not include excess verbiage like 'note:' or 'these changes relate to...'. Do not prefix it with 'extended description'.
- If you do not include an extended description, no additional output is required. DO NOT write 'No extended description'. Your output should only include words that are meaningful to describe the diff itself.
"""


def truncate_readme(readme: str, max_lines: int = README_MAX_LINES) -> str:
    """Limit README content to its first lines to bound token usage.

    Args:
        readme: The README text.
        max_lines: Number of lines to keep.

    Returns:
        The README unchanged if short enough, otherwise its first max_lines
        lines followed by a truncation marker line.
    """
    lines = readme.split("\n")
    if len(lines) <= max_lines:
        return readme
    return "\n".join(lines[:max_lines]) + "\n" + README_TRUNCATION_MARKER


def build_commit_prompt(
    content: str,
    readme: str,
    is_summary: bool,
    commit_config: CommitConfig,
) -> str:
    """Build the commit message prompt.

    Args:
        content: The staged diff, or its summary for oversized diffs.
        readme: The project README (may be empty).
        is_summary: True if content is a summary rather than a raw diff.
        commit_config: Commit constraints (subject line length).

    Returns:
        The formatted prompt.
    """
    types_block = "VALID TYPES:\n" + "".join(
        f"{name} - {description}\n" for name, description in COMMIT_TYPES.items()
    )

    sections = [
        COMMIT_PROMPT_INTRO,
        types_block,
        COMMIT_PROMPT_EXAMPLES,
        COMMIT_PROMPT_REQUIREMENTS.format(max_length=commit_config.max_length),
    ]

    if readme:
        sections.append("PROJECT README:\n" + truncate_readme(readme) + "\n")

    header = SUMMARY_HEADER if is_summary else DIFF_HEADER
    sections.append(header + "\n" + content)

    return "\n".join(sections)

"""Composable text filters applied when a sink is displayed.

Filters never touch sink content itself; they only shape what the display
and the history preview print.

PUBLIC API:
  - strip_trailing_empty_lines: Remove blank lines at the end of output
  - collapse_empty_lines: Replace long runs of blank lines with a marker
  - tail_lines: Keep only the last N lines
  - for_display: Default filter chain for printing a sink
"""


def strip_trailing_empty_lines(content: str) -> str:
    """Remove trailing blank lines, keeping blank lines inside the content.

    Args:
        content: Text to filter.

    Returns:
        Content ending in its last non-blank line plus a newline, or "".
    """
    lines = content.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines) + "\n" if lines else ""


def collapse_empty_lines(content: str, threshold: int = 5) -> str:
    """Collapse runs of more than threshold blank lines.

    A collapsed run keeps one blank line on each side of an
    "... N empty lines omitted ..." marker.

    Args:
        content: Text to filter.
        threshold: Longest run of blank lines kept as-is.

    Returns:
        Filtered content, with the original trailing newline preserved.
    """
    if not content:
        return content

    result: list[str] = []
    run = 0

    def flush(trailing: bool) -> None:
        if run > threshold:
            kept = 1 if trailing else 2
            result.append("")
            result.append(f"... {run - kept} empty lines omitted ...")
            if not trailing:
                result.append("")
        else:
            result.extend([""] * run)

    for line in content.splitlines():
        if line.strip():
            flush(trailing=False)
            run = 0
            result.append(line)
        else:
            run += 1
    flush(trailing=True)

    text = "\n".join(result)
    return text + "\n" if content.endswith("\n") else text


def tail_lines(content: str, lines: int) -> str:
    """Keep the last lines of content."""
    if lines <= 0:
        return ""
    return "\n".join(content.splitlines()[-lines:])


def for_display(content: str) -> str:
    """Default chain: strip trailing blank lines, then collapse blank runs."""
    return collapse_empty_lines(strip_trailing_empty_lines(content))

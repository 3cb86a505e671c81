# src/yamlzoom/host/formatter.py
import difflib
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from yamlzoom.core.models import Severity

# Editor language ids that pygments knows under another name
LEXER_ALIASES = {
    "shellscript": "bash",
    "plaintext": "text",
}

SEVERITY_STYLES = {
    Severity.INFO: ("bold cyan", "ℹ"),
    Severity.WARNING: ("bold yellow", "⚠️"),
    Severity.ERROR: ("bold red", "❌"),
}


class ZoomFormatter:
    """
    ZoomFormatter: renders what a terminal-side host shows the user.
    Notifications, the diagnostic log, opened buffers and write-back diffs.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_notification(self, message: str, severity: Severity = Severity.INFO):
        style, icon = SEVERITY_STYLES[severity]
        self.console.print(f"[{style}]{icon}  {severity.value.upper()}:[/{style}] {message}")

    def show_log(self, message: str):
        self.console.print(f"[dim]{message}[/dim]", highlight=False)

    def show_buffer(self, uri: str, content: str, language: str):
        """Displays a freshly opened buffer with syntax highlighting."""
        lexer = LEXER_ALIASES.get(language, language)
        syntax = Syntax(content, lexer, theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"[bold white]{uri}[/bold white]",
                                 subtitle=language, border_style="cyan"))

    def show_write_back(self, uri: str, old_text: str, new_text: str):
        """
        Renders the unified diff a write-back applied to the source.
        Nothing is printed when the text did not change.
        """
        diff_list = list(difflib.unified_diff(
            old_text.splitlines(),
            new_text.splitlines(),
            fromfile=f"before: {uri}",
            tofile=f"after: {uri}",
            lineterm=""
        ))
        if not diff_list:
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Write-back: {uri}", border_style="green"))

"""Terminal output: notifications and post rendering."""

from __future__ import annotations

from datetime import datetime

from postdesk.kernel.capabilities import Notifier
from postdesk.kernel.types import Post


class TerminalNotifier(Notifier):
    """Prints toasts inline: green for success, red for failure."""

    def notify(self, title: str, description: str | None = None) -> None:
        color = "\033[31m" if "failed" in title.lower() else "\033[32m"
        print(f"  {color}{title}\033[0m")
        if description:
            print(f"  {description}")


def format_date(value: datetime) -> str:
    """e.g. "October 19, 2026" """
    return f"{value:%B} {value.day}, {value.year}"


def print_post_preview(index: int, post: Post) -> None:
    print(f"  {index}. {post.title}  \033[90m{format_date(post.date)}\033[0m")
    print(f"     {post.description}")


def print_post(post: Post) -> None:
    print()
    print(f"  \033[90m{format_date(post.date)}\033[0m")
    print(f"  \033[1m{post.title}\033[0m")
    print()
    for line in post.content.splitlines() or [""]:
        print(f"  {line}")
    print()


def print_errors(errors: dict[str, str]) -> None:
    for name, message in errors.items():
        print(f"  \033[31m{name}:\033[0m {message}")

"""Static package metadata surfaced by the CLI banner.

Values mirror ``pyproject.toml``; keep them in sync when releasing.
"""

from __future__ import annotations

from typing import Callable

name = "lib_log_elastic"
title = "Buffered log shipping to Elasticsearch with daily index rotation"
version = "0.1.0"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_elastic"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Write the metadata banner through ``writer`` (``print`` by default).

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_elastic:\\n'
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:\n", "\n"]
    lines.extend(f"    {label.ljust(pad)} = {value}\n" for label, value in fields)
    if writer is None:
        print("".join(lines), end="")
        return
    for line in lines:
        writer(line)

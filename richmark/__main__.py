"""richmark CLI entry point.

Allows running via `python -m richmark` and provides the console script
defined in `pyproject.toml`. Reads an HTML file and prints it after running
it through one of the conversion pipelines.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string

MODES = ("inline", "lists", "xhtml", "plain", "markup")

USAGE = f"usage: richmark [--version] [--mode {'|'.join(MODES)}] FILE"


def convert(html: str, mode: str) -> Optional[str]:
    """Load ``html`` into an editor and return it in the requested form.

    Returns None if the markup could not be parsed.
    """
    from .editor import RichTextEditor

    editor = RichTextEditor(settings={})
    if not editor.set_markup(html):
        return None
    if mode == "inline":
        return editor.generate_fully_inline_styled_markup()
    if mode == "lists":
        return editor.generate_fully_inline_styled_markup_with_lists()
    if mode == "xhtml":
        return editor.get_compact_xhtml()
    if mode == "plain":
        return editor.get_formatted_plain_text()
    return editor.get_markup()


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing: version, mode and one filename
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    mode = "inline"
    if args and args[0] == "--mode":
        if len(args) < 2 or args[1] not in MODES:
            print(USAGE, file=sys.stderr)
            return 2
        mode = args[1]
        args = args[2:]
    elif args and args[0].startswith("--mode="):
        mode = args[0].split("=", 1)[1]
        args = args[1:]
        if mode not in MODES:
            print(USAGE, file=sys.stderr)
            return 2
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 2

    try:
        with open(args[0], "r", encoding="utf-8") as f:
            html = f.read()
    except OSError as e:
        print(f"richmark: cannot read {args[0]}: {e}", file=sys.stderr)
        return 1

    result = convert(html, mode)
    if result is None:
        print(f"richmark: could not parse {args[0]}", file=sys.stderr)
        return 1
    sys.stdout.write(result)
    if not result.endswith("\n"):
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

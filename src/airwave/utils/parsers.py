"""
Argument and command parsing utilities.

Cross-cutting utilities for splitting user input into a command name and
its arguments.
"""

from typing import List


def parse_quoted_args(args: List[str]) -> List[str]:
    """
    Join whitespace-split arguments that belong to one quoted string.
    Handles both single and double quotes.

    Args:
        args: Raw argument list from whitespace split

    Returns:
        List of arguments with quotes removed

    Example:
        ['search', '"jazz', 'fm"', 'tag=news']
        -> ['search', 'jazz fm', 'tag=news']

    Quotes inside an argument (`tag="hip hop"`) also group:
        ['tag="hip', 'hop"'] -> ['tag=hip hop']
    """
    parsed = []
    current = []
    in_quote = False
    quote_char = None

    for arg in args:
        if not in_quote:
            start = _quote_start(arg)
            if start is None:
                parsed.append(arg)
                continue
            quote_char = arg[start]
            prefix, rest = arg[:start], arg[start + 1 :]
            # Quote opens and closes in the same token
            if rest.endswith(quote_char):
                parsed.append(prefix + rest[:-1])
                quote_char = None
            else:
                in_quote = True
                current = [prefix + rest]
        elif arg.endswith(quote_char):
            current.append(arg[:-1])
            parsed.append(" ".join(current))
            current = []
            in_quote = False
            quote_char = None
        else:
            current.append(arg)

    # Unclosed quote: keep what we have
    if in_quote:
        parsed.append(" ".join(current))

    return parsed


def _quote_start(arg: str) -> int | None:
    """Index of an opening quote at the start or right after `key=`."""
    if arg and arg[0] in ('"', "'"):
        return 0
    key, sep, value = arg.partition("=")
    if sep and value and value[0] in ('"', "'"):
        return len(key) + 1
    return None


def parse_command(user_input: str) -> tuple[str, List[str]]:
    """
    Parse user input into command and arguments.

    A leading "/" is optional. Quoted arguments are kept together.

    Args:
        user_input: Raw user input string

    Returns:
        Tuple of (command, args) where command is lowercase and args is a list
    """
    text = user_input.strip()
    if text.startswith("/"):
        text = text[1:]
    parts = parse_quoted_args(text.split())
    if not parts:
        return "", []

    return parts[0].lower(), parts[1:]


__all__ = ["parse_quoted_args", "parse_command"]

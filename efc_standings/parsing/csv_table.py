"""
Quote-aware tokenizer for the per-sheet CSV exports.

The gviz export quotes every field, doubles embedded quotes, and separates
rows with newlines. Quoted fields never span lines in practice, so rows are
split on newlines first and each line is tokenized on its own.
"""
import re


_LINE_BREAK = re.compile(r"\r?\n")


def parse_line(line: str) -> list[str]:
    """
    Split one CSV line into its fields.

    A `"` opens quote mode, `""` inside quote mode is a literal quote, a lone
    `"` closes quote mode, and `,` outside quote mode ends the field. An
    unterminated quote does not raise: the remainder of the line stays part
    of the current field.

    Args:
        line: A single line of delimited text (no line break).

    Returns:
        Ordered list of fields. Trailing empty fields are preserved.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if char == '"' and not in_quotes:
            in_quotes = True
        elif char == '"' and i + 1 < n and line[i + 1] == '"':
            current.append('"')
            i += 1
        elif char == '"':
            in_quotes = False
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def parse_table(raw_text: str) -> list[list[str]]:
    """
    Tokenize a whole sheet export into rows of fields.

    Blank lines are dropped entirely, so a blank data row cannot be told
    apart from a separator.

    Args:
        raw_text: Raw CSV text for one sheet (may be empty).

    Returns:
        List of rows, each a list of string fields.
    """
    if not raw_text:
        return []
    return [parse_line(line) for line in _LINE_BREAK.split(raw_text) if line.strip() != ""]


def serialize_line(fields: list[str]) -> str:
    """Inverse of `parse_line` for fields without line breaks."""
    out = []
    for value in fields:
        if "," in value or '"' in value:
            out.append('"' + value.replace('"', '""') + '"')
        else:
            out.append(value)
    return ",".join(out)

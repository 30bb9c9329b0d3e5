"""Line-oriented CSV tokenizer for platform exports."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_LINE_BREAK_RE = re.compile(r"\r?\n|\r")


@dataclass(frozen=True)
class TokenizedCsv:
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


def split_csv_line(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    idx = 0
    length = len(line)

    while idx < length:
        char = line[idx]
        if char == '"':
            if in_quotes and idx + 1 < length and line[idx + 1] == '"':
                current.append('"')
                idx += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        idx += 1

    fields.append("".join(current).strip())
    return fields


def split_lines(text: str) -> list[str]:
    return [line for line in _LINE_BREAK_RE.split(text) if line.strip()]


def tokenize(text: str) -> TokenizedCsv:
    lines = split_lines(text)
    if not lines:
        return TokenizedCsv()
    headers = split_csv_line(lines[0])
    rows = [split_csv_line(line) for line in lines[1:]]
    return TokenizedCsv(headers=headers, rows=rows)

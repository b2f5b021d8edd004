"""Parsers for the text printed by xprop and xwininfo.

Every parser returns a structured optional result and never raises on
malformed input: garbage in means "nothing found".
"""

import re

__all__ = [
    "parse_cardinals",
    "parse_client_list",
    "parse_description_xid",
    "parse_properties",
    "parse_quoted_string",
    "parse_tree_child",
]

XID_RE = re.compile(r"0x[0-9a-f]+")

# NAME(TYPE) = value  |  NAME(TYPE): value  |  NAME: not found.
PROPERTY_RE = re.compile(r"^(?P<name>\w+)(?:\((?P<type>[^)]*)\))?(?:\s*=\s*|:\s+)(?P<value>.*)$")
ABSENT_RE = re.compile(r"^(not found\.?|no such atom.*)$")
QUOTED_RE = re.compile(r'^"((?:[^\\"]|\\.)*)"')
CHILDREN_SPLIT_RE = re.compile(r"child(?:ren)?:")


def parse_description_xid(description: str | None) -> str | None:
    """Extract the X id from a window description such as `0x3a00007 Firefox`."""
    if not description:
        return None
    match = XID_RE.search(description)
    return match.group(0) if match else None


def parse_tree_child(output: str, title: str) -> str | None:
    """Find the client window in `xwininfo -children` output.

    The id preceding the quoted title wins, which also covers frameless
    windows whose header line already names the client. Otherwise the first
    listed child is returned.
    """
    if not output:
        return None
    if title:
        match = re.search(rf'(0x[0-9a-f]+) +"{re.escape(title)}"', output)
        if match:
            return match.group(1)
    parts = CHILDREN_SPLIT_RE.split(output, maxsplit=1)
    if len(parts) < 2:  # noqa: PLR2004
        return None
    match = XID_RE.search(parts[1])
    return match.group(0) if match else None


def parse_properties(output: str) -> dict[str, str]:
    """Map property names to their raw value text.

    Properties reported as missing are left out.

    Example xprop output:
        _MOTIF_WM_HINTS(_MOTIF_WM_HINTS) = 0x2, 0x0, 0x1, 0x0, 0x0
        _NET_ACTIVE_WINDOW(WINDOW): window id # 0x2c00003
        _GTK_HIDE_TITLEBAR_WHEN_MAXIMIZED:  not found.
    """
    props: dict[str, str] = {}
    if not output:
        return props
    for line in output.splitlines():
        match = PROPERTY_RE.match(line)
        if not match:
            continue
        value = match.group("value").strip()
        if ABSENT_RE.match(value):
            continue
        props[match.group("name")] = value.removeprefix("window id # ")
    return props


def parse_cardinals(raw: str | None) -> list[int] | None:
    """Parse a comma separated list of numbers (hex with a 0x prefix, else decimal)."""
    if not raw:
        return None
    values = []
    for part in raw.split(","):
        item = part.strip()
        try:
            values.append(int(item, 16) if item.lower().startswith("0x") else int(item))
        except ValueError:
            return None
    return values


def parse_quoted_string(raw: str | None) -> str | None:
    """Unescape the first double-quoted string of a property value."""
    if not raw:
        return None
    match = QUOTED_RE.match(raw)
    if not match:
        return None
    return re.sub(r"\\(.)", r"\1", match.group(1))


def parse_client_list(output: str) -> list[str]:
    """Return every window id listed in `xprop -root _NET_CLIENT_LIST` output."""
    if not output:
        return []
    return XID_RE.findall(output)

"""Parsing and rendering of the gitx managed block in an SSH config file.

The managed block is the region between ``MARKER_BEGIN`` and ``MARKER_END``.
Everything outside it belongs to the user and is kept byte for byte; inside
it gitx owns one ``Host`` stanza per identity.
"""

from dataclasses import dataclass
from typing import NamedTuple

MARKER_BEGIN = "# BEGIN gitx managed"
MARKER_END = "# END gitx managed"

GITHUB_HOST = "github.com"


@dataclass(frozen=True)
class HostEntry:
    """A host alias stanza inside the managed block."""
    host_alias: str
    identity_file: str

    def render(self) -> str:
        """Render the stanza as SSH config lines."""
        return (
            f"Host {self.host_alias}\n"
            f"  HostName {GITHUB_HOST}\n"
            f"  User git\n"
            f"  IdentityFile {self.identity_file}\n"
            f"  IdentitiesOnly yes\n"
        )


class ParsedConfig(NamedTuple):
    """An SSH config split into foreign text and managed entries."""
    outside_text: str
    entries: tuple[HostEntry, ...]


def _directive(line: str) -> tuple[str, str]:
    """Split a config line into a lowercase keyword and its argument."""
    parts = line.strip().split(None, 1)
    if not parts:
        return "", ""
    keyword = parts[0].lower()
    value = parts[1].strip() if len(parts) > 1 else ""
    return keyword, value


def _split_lines(text: str) -> list[str]:
    """Split on newlines only, keeping each line's terminator."""
    lines = text.split("\n")
    last = lines.pop()
    result = [line + "\n" for line in lines]
    if last:
        result.append(last)
    return result


def parse(raw_text: str) -> ParsedConfig:
    """Split raw SSH config text into outside text and managed entries.

    An unclosed managed region runs to the end of the file. Marker lines
    themselves are never part of the outside text.

    Args:
        raw_text: Full contents of the SSH config file

    Returns:
        ParsedConfig with the foreign text and the entries in file order
    """
    outside: list[str] = []
    entries: list[HostEntry] = []
    in_block = False
    host: str | None = None
    identity_file: str | None = None

    def flush() -> None:
        if host and identity_file:
            entries.append(HostEntry(host_alias=host, identity_file=identity_file))

    for line in _split_lines(raw_text):
        if MARKER_BEGIN in line:
            # A repeated begin marker inside an open region is ignored
            if not in_block:
                in_block = True
                host, identity_file = None, None
            continue
        if MARKER_END in line:
            if in_block:
                flush()
                host, identity_file = None, None
            in_block = False
            continue

        if not in_block:
            outside.append(line)
            continue

        keyword, value = _directive(line)
        if keyword == "host" and value:
            flush()
            host, identity_file = value, None
        elif keyword == "identityfile" and host is not None:
            identity_file = value

    if in_block:
        flush()

    return ParsedConfig(outside_text="".join(outside), entries=tuple(entries))


def dedupe(entries: tuple[HostEntry, ...]) -> tuple[HostEntry, ...]:
    """Collapse repeated aliases; the last occurrence wins, first position kept."""
    by_alias: dict[str, HostEntry] = {}
    for entry in entries:
        by_alias[entry.host_alias] = entry
    return tuple(by_alias.values())


def upsert_entry(
    entries: tuple[HostEntry, ...], host_alias: str, identity_file: str
) -> tuple[HostEntry, ...]:
    """Return entries with ``host_alias`` pointing at ``identity_file``."""
    new_entry = HostEntry(host_alias=host_alias, identity_file=identity_file)
    if any(e.host_alias == host_alias for e in entries):
        return tuple(new_entry if e.host_alias == host_alias else e for e in entries)
    return (*entries, new_entry)


def remove_entry(
    entries: tuple[HostEntry, ...], host_alias: str
) -> tuple[HostEntry, ...]:
    """Return entries without any stanza for ``host_alias``."""
    return tuple(e for e in entries if e.host_alias != host_alias)


def render_block(entries: tuple[HostEntry, ...]) -> str:
    """Render the managed block, markers included."""
    stanzas = "\n".join(entry.render() for entry in entries)
    return f"{MARKER_BEGIN}\n{stanzas}{MARKER_END}\n"


def rebuild(outside_text: str, entries: tuple[HostEntry, ...]) -> str:
    """Join the outside text with a freshly rendered managed block.

    With no entries the result carries no managed block at all.
    """
    if not entries:
        return outside_text
    separator = "\n" if outside_text and not outside_text.endswith("\n") else ""
    return outside_text + separator + render_block(entries)

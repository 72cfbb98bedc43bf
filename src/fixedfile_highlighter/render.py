"""Line rendering: wrap resolved regions in annotated, coloured spans."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Union

from .diagnostics import Diagnostic, LineTooShort, RegionNotApplied
from .regions import Region, resolve_regions
from .rules import RuleSet

DEFAULT_TEXT_COLOR = "020202"


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class OpenSpan:
    name: str
    color: str
    color_index: int


@dataclass(frozen=True)
class CloseSpan:
    name: str
    forced: bool = False


Fragment = Union[Text, OpenSpan, CloseSpan]


@dataclass
class RenderedLine:
    """Markup fragments for one line plus the anomalies found while rendering it."""

    line_index: int
    fragments: List[Fragment] = field(default_factory=list)
    regions: List[Region] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def color_indices(self) -> List[int]:
        return [fragment.color_index for fragment in self.fragments if isinstance(fragment, OpenSpan)]

    @property
    def plain_text(self) -> str:
        return "".join(fragment.text for fragment in self.fragments if isinstance(fragment, Text))

    def to_html(self, text_color: str = DEFAULT_TEXT_COLOR) -> str:
        """Serialise the fragments as HTML, without the line terminator."""

        parts: List[str] = []
        for fragment in self.fragments:
            if isinstance(fragment, Text):
                parts.append(html.escape(fragment.text, quote=False))
            elif isinstance(fragment, OpenSpan):
                style = f"background: #{fragment.color}; color: #{text_color};"
                parts.append(
                    f'<abbr title="{html.escape(fragment.name, quote=True)}" style="{style}">'
                )
            else:
                parts.append("</abbr>")
        return "".join(parts)


def render_line(
    line: str,
    line_index: int,
    regions: Sequence[Region],
    palette: Sequence[str],
) -> RenderedLine:
    """
    Walk ``line`` one character at a time, opening and closing spans for ``regions``.

    Every opening takes the next palette colour; the palette cursor is shared by all
    regions and wraps around. A region closes (and is marked ``applied``) right after
    the character at ``end - 1``. Spans still open at the end of the line are
    force-closed innermost first and reported as ``LineTooShort``; every region that
    was not applied is reported as ``RegionNotApplied``.

    Parameters:
        line: Decoded line text without its terminator.
        line_index: 0-based index of the line, used in diagnostics.
        regions: Regions in rule order. Their ``applied`` flags are updated in place.
        palette: Non-empty sequence of hex colours.

    Returns:
        RenderedLine: Fragments, the regions and any diagnostics for this line.

    Raises:
        ValueError: If ``palette`` is empty.
    """

    if not palette:
        raise ValueError("palette must contain at least one colour")

    rendered = RenderedLine(line_index=line_index, regions=list(regions))
    fragments = rendered.fragments
    pending_text: List[str] = []
    open_stack: List[int] = []
    color_cursor = 0

    def _flush() -> None:
        if pending_text:
            fragments.append(Text("".join(pending_text)))
            pending_text.clear()

    for col, char in enumerate(line):
        for index, region in enumerate(rendered.regions):
            if region.start == col and region.end > region.start:
                _flush()
                fragments.append(OpenSpan(region.name, palette[color_cursor], color_cursor))
                color_cursor = (color_cursor + 1) % len(palette)
                open_stack.append(index)
        pending_text.append(char)
        closing = [index for index in reversed(open_stack) if rendered.regions[index].end == col + 1]
        if closing:
            _flush()
            for index in closing:
                region = rendered.regions[index]
                fragments.append(CloseSpan(region.name))
                open_stack.remove(index)
                region.applied = True
    _flush()

    if open_stack:
        rendered.diagnostics.append(LineTooShort(line_index, len(open_stack)))
        for index in reversed(open_stack):
            fragments.append(CloseSpan(rendered.regions[index].name, forced=True))
        open_stack.clear()

    for region in rendered.regions:
        if not region.applied:
            rendered.diagnostics.append(RegionNotApplied(region.name, line_index))
    return rendered


def highlight_lines(
    lines: Iterable[str],
    rule_set: RuleSet,
    palette: Sequence[str],
) -> Iterator[RenderedLine]:
    """Resolve and render each line lazily, in input order."""

    for line_index, line in enumerate(lines):
        resolved = resolve_regions(rule_set, line, line_index)
        rendered = render_line(line, line_index, resolved.regions, palette)
        rendered.diagnostics[:0] = resolved.diagnostics
        yield rendered

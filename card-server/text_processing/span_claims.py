"""
Claimed-span bookkeeping for rules text annotation.

The working text is held as an ordered list of segments. Free segments are
still open to later passes; every other segment has been claimed by a pass
and is only copied into the output. Keyword passes match inside a single
free segment, so two claims can never overlap. Wrapping passes (italics and
author overrides) may run across claimed segments, but only around whole
segments and balanced italic markers, so the markers they emit never cross.
"""

import re
from bisect import bisect_right
from typing import Callable, List, NamedTuple, Optional, Tuple

from .markup import (
    BOLD_END, BOLD_START, ITALIC_END, ITALIC_START,
    is_well_formed, parse_markup,
)

FREE = 'free'          # still claimable
BOLD = 'bold'          # claimed, rendered inside bold markers
VERBATIM = 'verbatim'  # claimed, rendered exactly as held
MARKER = 'marker'      # a lone italic marker emitted by an italic wrap

# Stands in for one claimed segment while a wrapping pass matches
_CLAIMED = '\ue010'


class Segment(NamedTuple):
    text: str
    kind: str
    italic: bool = False


def _render_runs(runs) -> str:
    parts = []
    for run in runs:
        text = run.text
        if run.bold:
            text = BOLD_START + text + BOLD_END
        if run.italic:
            text = ITALIC_START + text + ITALIC_END
        parts.append(text)
    return ''.join(parts)


class ClaimedText:
    """Ordered free/claimed segments of one piece of rules text."""

    def __init__(self, segments: Optional[List[Segment]] = None):
        self.segments: List[Segment] = list(segments or [])

    @classmethod
    def from_markup(cls, markup: str) -> 'ClaimedText':
        """
        Build the segment list from text that may already carry markers.

        Bold regions become claimed segments; italic markers are kept as
        marker segments and the text between them is flagged italic so it
        is not italicized a second time.
        """
        if not is_well_formed(markup):
            markup = _render_runs(parse_markup(markup))

        segments: List[Segment] = []
        buffer: List[str] = []
        bold_depth = 0
        italic_depth = 0

        def flush_free():
            if buffer:
                segments.append(Segment(''.join(buffer), FREE, italic_depth > 0))
                buffer.clear()

        for char in markup:
            if bold_depth:
                buffer.append(char)
                if char == BOLD_START:
                    bold_depth += 1
                elif char == BOLD_END:
                    bold_depth -= 1
                    if not bold_depth:
                        segments.append(Segment(''.join(buffer), VERBATIM, italic_depth > 0))
                        buffer.clear()
            elif char == BOLD_START:
                flush_free()
                buffer.append(char)
                bold_depth = 1
            elif char in (ITALIC_START, ITALIC_END):
                flush_free()
                segments.append(Segment(char, MARKER, italic_depth > 0))
                italic_depth += 1 if char == ITALIC_START else -1
            else:
                buffer.append(char)

        flush_free()
        return cls(segments)

    def claim(self, pattern: re.Pattern, build: Callable[[re.Match, bool], List[Segment]]) -> int:
        """
        Replace every match inside a free segment with the segments `build`
        returns for it. Empty matches are ignored.

        Returns:
            Number of matches claimed
        """
        claimed = 0
        result: List[Segment] = []
        for segment in self.segments:
            if segment.kind != FREE:
                result.append(segment)
                continue

            cursor = 0
            for match in pattern.finditer(segment.text):
                if match.start() == match.end():
                    continue
                if match.start() > cursor:
                    result.append(Segment(segment.text[cursor:match.start()], FREE, segment.italic))
                result.extend(s for s in build(match, segment.italic) if s.text)
                cursor = match.end()
                claimed += 1
            if cursor < len(segment.text):
                result.append(Segment(segment.text[cursor:], FREE, segment.italic))

        self.segments = result
        return claimed

    def bold(self, pattern: re.Pattern) -> int:
        """Claim matches and render them bold."""
        return self.claim(pattern, lambda m, it: [Segment(m.group(0), BOLD, it)])

    def protect(self, pattern: re.Pattern) -> int:
        """Claim matches and render them exactly as written."""
        return self.claim(pattern, lambda m, it: [Segment(m.group(0), VERBATIM, it)])

    def bold_group(self, pattern: re.Pattern, group: int) -> int:
        """Bold one capture group of each match; the rest of the match stays free."""
        def build(match, italic):
            if match.group(group) is None:
                return [Segment(match.group(0), FREE, italic)]
            start, end = match.span(group)
            offset = match.start()
            text = match.group(0)
            return [
                Segment(text[:start - offset], FREE, italic),
                Segment(match.group(group), BOLD, italic),
                Segment(text[end - offset:], FREE, italic),
            ]
        return self.claim(pattern, build)

    def italicize(self, pattern: re.Pattern, group: int = 0) -> int:
        """
        Wrap matches in italic markers. A match may run across claimed
        segments; the wrapped text stays free, so later passes can still bold
        inside it. Text that is already italic only loses its delimiters.
        """
        def build(content, already_italic):
            if already_italic:
                return content
            return ([Segment(ITALIC_START, MARKER, False)]
                    + [segment._replace(italic=True) for segment in content]
                    + [Segment(ITALIC_END, MARKER, True)])
        return self.wrap(pattern, group, build)

    def bold_span(self, pattern: re.Pattern, group: int = 0) -> int:
        """
        Bold the text of a group as one claimed span, even when earlier passes
        claimed parts of it. Inner bold collapses into the span; inner italics
        are kept.
        """
        def build(content, italic):
            text = ''.join(segment.text for segment in content)
            for marker in (BOLD_START, BOLD_END):
                text = text.replace(marker, '')
            return [Segment(text, BOLD, italic)]
        return self.wrap(pattern, group, build)

    def wrap(self, pattern: re.Pattern, group: int,
             build: Callable[[List[Segment], bool], List[Segment]]) -> int:
        """
        Match `pattern` over the whole text with every claimed segment standing
        in as a single placeholder character, and replace each match with the
        segments `build` returns for its group. Text outside the group is
        dropped.

        A match is skipped when its delimiters (the match outside the group)
        touch a claimed segment, or when its group holds an unpaired italic
        marker.

        Returns:
            Number of matches wrapped
        """
        view, starts = self._matching_view()
        spans = []
        for match in pattern.finditer(view):
            if match.group(group) is None:
                continue
            start, end = match.span()
            inner_start, inner_end = match.span(group)
            if inner_start == inner_end:
                continue
            if _CLAIMED in view[start:inner_start] or _CLAIMED in view[inner_end:end]:
                continue
            if not self._markers_balanced(view, starts, inner_start, inner_end):
                continue
            spans.append((start, inner_start, inner_end, end))

        if not spans:
            return 0

        segments, segment_starts = self._cut_at(p for span in spans for p in span)
        index_at = {position: index for index, position in enumerate(segment_starts)}
        index_at[len(view)] = len(segments)

        result: List[Segment] = []
        cursor = 0
        for start, inner_start, inner_end, end in spans:
            first = index_at[start]
            result.extend(segments[cursor:first])
            content = segments[index_at[inner_start]:index_at[inner_end]]
            result.extend(s for s in build(content, segments[first].italic) if s.text)
            cursor = index_at[end]
        result.extend(segments[cursor:])

        self.segments = _merge_free(result)
        return len(spans)

    def _matching_view(self) -> Tuple[str, List[int]]:
        parts = []
        starts = []
        position = 0
        for segment in self.segments:
            piece = segment.text if segment.kind == FREE else _CLAIMED
            starts.append(position)
            parts.append(piece)
            position += len(piece)
        return ''.join(parts), starts

    def _markers_balanced(self, view: str, starts: List[int], start: int, end: int) -> bool:
        depth = 0
        for position in range(start, end):
            if view[position] != _CLAIMED:
                continue
            segment = self.segments[bisect_right(starts, position) - 1]
            if segment.kind != MARKER:
                continue
            depth += 1 if segment.text == ITALIC_START else -1
            if depth < 0:
                return False
        return depth == 0

    def _cut_at(self, positions) -> Tuple[List[Segment], List[int]]:
        """Split free segments so every position in the view is a segment boundary."""
        cuts = sorted(set(positions))
        result: List[Segment] = []
        starts: List[int] = []
        position = 0
        for segment in self.segments:
            if segment.kind != FREE:
                result.append(segment)
                starts.append(position)
                position += 1
                continue

            length = len(segment.text)
            last = 0
            for cut in [c - position for c in cuts if position < c < position + length] + [length]:
                result.append(segment._replace(text=segment.text[last:cut]))
                starts.append(position + last)
                last = cut
            position += length
        return result, starts

    def render(self) -> str:
        parts = []
        for segment in self.segments:
            if segment.kind == BOLD:
                parts.append(BOLD_START + segment.text + BOLD_END)
            else:
                parts.append(segment.text)
        return ''.join(parts)


def _merge_free(segments: List[Segment]) -> List[Segment]:
    merged: List[Segment] = []
    for segment in segments:
        previous = merged[-1] if merged else None
        if (previous and segment.kind == FREE and previous.kind == FREE
                and previous.italic == segment.italic):
            merged[-1] = previous._replace(text=previous.text + segment.text)
        else:
            merged.append(segment)
    return merged

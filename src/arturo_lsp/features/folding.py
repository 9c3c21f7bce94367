"""
Folding ranges for blocks, dictionaries and multi-line strings.
"""

from typing import List, Tuple

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis


def _fold(start: int, end: int) -> types.FoldingRange:
    return types.FoldingRange(
        start_line=start, end_line=end, kind=types.FoldingRangeKind.Region,
    )


def folding_ranges(analysis: DocumentAnalysis) -> List[types.FoldingRange]:
    """A range for every ``[``/``#[`` pair or string spanning two or more lines."""
    ranges: List[Tuple[int, int]] = []
    stack: List[int] = []
    string_start = None

    for index, scan in enumerate(analysis.scans):
        for ch, tag in zip(scan.text, scan.tags):
            if not tag.is_code:
                continue
            if ch == '[':
                stack.append(index)
            elif ch == ']' and stack:
                opener = stack.pop()
                if index > opener:
                    ranges.append((opener, index))

        if scan.carry_out.in_string and not scan.carry_in.in_string:
            string_start = index
        elif scan.carry_in.in_string and not scan.carry_out.in_string:
            if string_start is not None and index > string_start:
                ranges.append((string_start, index))
            string_start = None

    return [_fold(start, end) for start, end in sorted(ranges)]

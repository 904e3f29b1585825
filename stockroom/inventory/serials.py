"""
Serial-number range parsing for bulk device entry.

Accepted input is a comma separated list (ASCII ``,`` or full-width ``，``)
of bare numbers and inclusive ``start-end`` ranges, e.g. ``"1-5,7,9-11"``.

Tokens are reduced to merged ``(start, end)`` intervals first, so sizes are
known without expanding a range.
"""

import re

from .exceptions import SerialNumberError

FULLWIDTH_COMMA = '，'

_NUMBER_RE = re.compile(r'^[0-9]+$')


def _tokens(raw):
    normalized = (raw or '').replace(FULLWIDTH_COMMA, ',').strip()
    return [part.strip() for part in normalized.split(',') if part.strip()]


def _parse_number(token):
    if not _NUMBER_RE.match(token):
        raise SerialNumberError(f'无效的序列号: {token}')
    number = int(token)
    return number, number


def _parse_range(token):
    parts = [part.strip() for part in token.split('-')]
    if len(parts) != 2 or not all(_NUMBER_RE.match(part) for part in parts):
        raise SerialNumberError(f'无效的序列号范围: {token}')
    start, end = int(parts[0]), int(parts[1])
    if start > end:
        raise SerialNumberError(f'无效的序列号范围: {start} 大于 {end}')
    return start, end


def _parse_token(token):
    if '-' in token:
        return _parse_range(token)
    return _parse_number(token)


def _merge(intervals):
    """Merge overlapping or adjacent intervals, ascending."""
    merged = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1] + 1:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])
    return merged


def _size(intervals):
    return sum(end - start + 1 for start, end in intervals)


def serial_intervals(raw, limit=None):
    """
    Merged ``[start, end]`` intervals covered by ``raw``.

    Raises SerialNumberError on a malformed token, or when ``limit`` is
    given and the input covers more serial numbers than that.
    """
    merged = _merge(_parse_token(token) for token in _tokens(raw))
    if limit is not None and _size(merged) > limit:
        raise SerialNumberError(f'单次录入的设备数量不能超过 {limit} 台')
    return merged


def parse_serial_numbers(raw, limit=None):
    """
    Expand ``raw`` into a sorted, de-duplicated list of serial numbers.

    Serial numbers are returned as strings of their integer value, so
    ``"007"`` becomes ``"7"``. Raises SerialNumberError on a token that
    is not a number, a range whose start exceeds its end, or input
    larger than ``limit``.
    """
    return [
        str(number)
        for start, end in serial_intervals(raw, limit=limit)
        for number in range(start, end + 1)
    ]


def count_serial_numbers(raw):
    """Count the distinct serial numbers in ``raw`` without raising; bad tokens count as zero."""
    intervals = []
    for token in _tokens(raw):
        try:
            intervals.append(_parse_token(token))
        except SerialNumberError:
            continue
    return _size(_merge(intervals))


def is_valid_serial_input(raw, limit=None):
    try:
        serial_intervals(raw, limit=limit)
    except SerialNumberError:
        return False
    return True

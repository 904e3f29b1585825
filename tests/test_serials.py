import time

import pytest
from hypothesis import given, strategies as st

from stockroom.inventory.exceptions import SerialNumberError
from stockroom.inventory.serials import (
    parse_serial_numbers, count_serial_numbers, is_valid_serial_input,
)


@pytest.mark.parametrize('raw, expected', [
    ('1-3,5,7-9', ['1', '2', '3', '5', '7', '8', '9']),
    ('9,1-3', ['1', '2', '3', '9']),
    ('5', ['5']),
    ('3-3', ['3']),
    ('1-3,2-4', ['1', '2', '3', '4']),
    ('007,7', ['7']),
    (' 1 , 2 ,, 3 ', ['1', '2', '3']),
    ('1，2，4-5', ['1', '2', '4', '5']),
    ('', []),
    ('  ,  ', []),
])
def test_parse_serial_numbers(raw, expected):
    assert parse_serial_numbers(raw) == expected


def test_parse_output_is_strictly_ascending():
    result = [int(n) for n in parse_serial_numbers('20-25,3,11,4-12,1')]
    assert result == sorted(set(result))
    assert all(a < b for a, b in zip(result, result[1:]))


def test_numeric_not_lexicographic_order():
    assert parse_serial_numbers('10,9,100') == ['9', '10', '100']


def test_reversed_range_is_rejected():
    with pytest.raises(SerialNumberError, match='5 大于 2'):
        parse_serial_numbers('5-2')


@pytest.mark.parametrize('raw', ['abc', '1,x', '1.5', '-3', '1-2-3', '1-', 'a-3'])
def test_malformed_input_is_rejected(raw):
    with pytest.raises(SerialNumberError):
        parse_serial_numbers(raw)


def test_invalid_number_message():
    with pytest.raises(SerialNumberError, match='无效的序列号: abc'):
        parse_serial_numbers('abc')


def test_serial_number_error_is_value_error():
    with pytest.raises(ValueError):
        parse_serial_numbers('abc')


@pytest.mark.parametrize('raw', ['1-3,5,7-9', '9,1-3', '1,1,1', '1-5,3-8', ''])
def test_count_matches_parse_for_valid_input(raw):
    assert count_serial_numbers(raw) == len(parse_serial_numbers(raw))


def test_count_ignores_bad_tokens():
    assert count_serial_numbers('1-3,abc,9-7,10') == 4


def test_is_valid_serial_input():
    assert is_valid_serial_input('1-3,5')
    assert is_valid_serial_input('')
    assert not is_valid_serial_input('3-1')
    assert not is_valid_serial_input('x')


# ============== Batch limit ==============

def test_limit_rejects_oversized_input():
    with pytest.raises(SerialNumberError, match='单次录入的设备数量不能超过 5 台'):
        parse_serial_numbers('1-3,10-12', limit=5)
    assert parse_serial_numbers('1-3,2-5', limit=5) == ['1', '2', '3', '4', '5']


def test_huge_range_is_rejected_without_expanding():
    started = time.monotonic()
    with pytest.raises(SerialNumberError, match='不能超过 5000 台'):
        parse_serial_numbers('1-1000000000', limit=5000)
    assert not is_valid_serial_input('1-1000000000', limit=5000)
    assert count_serial_numbers('1-1000000000,5') == 1000000000
    assert time.monotonic() - started < 1


def test_is_valid_serial_input_without_limit_accepts_wide_ranges():
    assert is_valid_serial_input('1-1000000000')


# ============== Properties ==============

serial_ints = st.integers(min_value=0, max_value=10_000)
serial_ranges = st.tuples(serial_ints, st.integers(min_value=0, max_value=50)).map(
    lambda pair: (pair[0], pair[0] + pair[1])
)
tokens = st.lists(st.one_of(serial_ints.map(lambda n: (n, n)), serial_ranges), max_size=12)


def render(intervals, separators):
    parts = [str(start) if start == end else f'{start}-{end}' for start, end in intervals]
    text = ''
    for i, part in enumerate(parts):
        text += (separators[i % len(separators)] if i else '') + part
    return text


def expand(intervals):
    return [n for start, end in intervals for n in range(start, end + 1)]


@given(tokens, st.lists(st.sampled_from([',', '，', ' , ']), min_size=1, max_size=3))
def test_parse_is_sorted_union_of_tokens(intervals, separators):
    raw = render(intervals, separators)
    assert parse_serial_numbers(raw) == [str(n) for n in sorted(set(expand(intervals)))]


@given(tokens, st.randoms(use_true_random=False))
def test_token_order_does_not_matter(intervals, rng):
    shuffled = list(intervals)
    rng.shuffle(shuffled)
    assert parse_serial_numbers(render(shuffled, [','])) == parse_serial_numbers(render(intervals, ['，']))


@given(tokens)
def test_count_equals_parsed_length(intervals):
    raw = render(intervals, [','])
    assert count_serial_numbers(raw) == len(parse_serial_numbers(raw))
    assert is_valid_serial_input(raw)

from contextlib import nullcontext
from typing import List, Tuple, Union

import pytest

from sqlpool.util import MEGABYTES, megabytes_to_bytes, merge_dicts


class TestMergeDicts:
    """Test the merge_dicts() function."""

    # this contains tuples of ([input_dict1, input_dict2, ...], expected result or exception)
    test_cases: List[Tuple[List[dict], Union[dict, Exception]]] = [
        ([{"a": 1}, {"b": 2}], {"a": 1, "b": 2}),
        ([{"a": {"b": 1}}, {"a": {"b": 2, "c": 3}, "d": 4}], {"a": {"b": 2, "c": 3}, "d": 4}),
        ([], ValueError),
        ([{"a": {"b": 1}}, {"a": 5}], TypeError),
        ([{"a": 5}, {"a": {"b": 1}}], TypeError),
        ([{"a": 5}, 5], TypeError),
    ]

    @pytest.mark.parametrize("input_dicts,expected", test_cases)
    def test_merge_dicts(self, input_dicts, expected):
        if isinstance(expected, type) and issubclass(expected, Exception):
            expectation = pytest.raises(expected)
        else:
            expectation = nullcontext()

        with expectation:
            result = merge_dicts(*input_dicts)

        if isinstance(expected, dict):
            assert expected == result


@pytest.mark.parametrize("megabytes, expected", ((0, 0), (1, MEGABYTES), (1024, 1073741824)))
def test_megabytes_to_bytes(megabytes, expected):
    assert megabytes_to_bytes(megabytes) == expected

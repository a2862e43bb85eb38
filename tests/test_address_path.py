#!/usr/bin/env python3
"""Unit tests for AddressPath."""

import pytest

from proxy import AddressPath


def test_empty_path():
    path = AddressPath()
    assert path.is_empty()
    assert len(path) == 0
    assert path.to_list() == []


def test_first_hop_and_remaining():
    path = AddressPath([4, 2, 7])

    assert not path.is_empty()
    assert path.first_hop() == 4
    assert path.remaining() == AddressPath([2, 7])
    assert path.remaining().remaining().remaining().is_empty()
    print("✓ First hop / remaining test passed")


def test_single_hop_remaining_is_empty():
    path = AddressPath([3])
    assert path.remaining().is_empty()
    assert path.remaining() == []


def test_empty_path_has_no_first_hop():
    with pytest.raises(IndexError):
        AddressPath([]).first_hop()
    with pytest.raises(IndexError):
        AddressPath([]).remaining()


def test_path_is_immutable_copy_of_input():
    hops = [1, 2]
    path = AddressPath(hops)
    hops.append(3)

    assert path.to_list() == [1, 2]
    returned = path.to_list()
    returned.append(9)
    assert len(path) == 2


def test_from_value_reuses_instances():
    path = AddressPath([1])
    assert AddressPath.from_value(path) is path
    assert AddressPath.from_value((5, 6)) == [5, 6]


def test_equality_and_hash():
    assert AddressPath([1, 2]) == AddressPath((1, 2))
    assert AddressPath([1, 2]) != AddressPath([2, 1])
    assert len({AddressPath([1]), AddressPath([1]), AddressPath([2])}) == 2
    assert repr(AddressPath([1, 2])) == "AddressPath([1, 2])"
    print("✓ Address path equality test passed")

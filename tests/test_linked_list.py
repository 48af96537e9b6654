import pytest

from choochoo.linked_list import LinkedList


def test_append_keeps_order():
    ll = LinkedList([1, 2, 3])
    assert list(ll) == [1, 2, 3]
    assert len(ll) == 3


def test_append_front():
    ll = LinkedList([1, 2])
    ll.append_front(0)
    assert list(ll) == [0, 1, 2]
    assert ll.front() == 0
    assert ll.back() == 2


def test_pop_and_pop_front():
    ll = LinkedList(["a", "b", "c"])
    assert ll.pop() == "c"
    assert ll.pop_front() == "a"
    assert list(ll) == ["b"]
    assert len(ll) == 1


def test_pop_to_empty_then_reuse():
    ll = LinkedList([1])
    assert ll.pop_front() == 1
    assert len(ll) == 0
    ll.append(2)
    ll.append_front(1)
    assert list(ll) == [1, 2]


@pytest.mark.parametrize("op", ["pop", "pop_front", "front", "back"])
def test_empty_list_raises(op):
    with pytest.raises(IndexError):
        getattr(LinkedList(), op)()


def test_remove_middle():
    ll = LinkedList([1, 2, 3])
    assert ll.remove(2) is True
    assert list(ll) == [1, 3]
    assert len(ll) == 2


def test_remove_ends_update_front_and_back():
    ll = LinkedList([1, 2, 3])
    assert ll.remove(1)
    assert ll.remove(3)
    assert ll.front() == 2
    assert ll.back() == 2


def test_remove_missing():
    ll = LinkedList([1, 2])
    assert ll.remove(5) is False
    assert list(ll) == [1, 2]


def test_remove_only_first_match():
    ll = LinkedList([4, 4, 4])
    ll.remove(4)
    assert list(ll) == [4, 4]


def test_cursor_iterates():
    ll = LinkedList([1, 2, 3])
    assert list(ll.cursor()) == [1, 2, 3]


def test_remove_while_iterating_cursor():
    ll = LinkedList([1, 2, 3, 4, 5])
    for item in ll.cursor():
        if item % 2 == 0:
            ll.remove(item)
    assert list(ll) == [1, 3, 5]


def test_cursor_prev():
    ll = LinkedList(["a", "b", "c"])
    cur = ll.cursor()
    assert next(cur) == "a"
    assert next(cur) == "b"
    assert cur.prev() is True
    assert next(cur) == "b"


def test_cursor_prev_at_head():
    cur = LinkedList(["a"]).cursor()
    assert cur.prev() is False
    assert next(cur) == "a"


def test_cursor_prev_after_end():
    cur = LinkedList(["a"]).cursor()
    next(cur)
    assert cur.prev() is False
    with pytest.raises(StopIteration):
        next(cur)
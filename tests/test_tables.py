import re

from lexgraph.tables import TableStack

_DECL = re.compile(r"static (\w+): \[u8; 256\] = \[([^\]]*)\];")


def _parse(rendered):
    return {
        name: [int(v) for v in values.split(", ")]
        for name, values in _DECL.findall(rendered)
    }


def test_unused_stack_renders_nothing():
    assert TableStack().render() == ""


def test_first_view():
    view = TableStack().view()
    assert view.ident() == "COMPACT_TABLE_0"
    assert view.mask() == 1


def test_eight_views_share_one_table_with_distinct_bits():
    stack = TableStack()
    views = [stack.view() for _ in range(8)]
    assert {v.ident() for v in views} == {"COMPACT_TABLE_0"}
    masks = [v.mask() for v in views]
    assert len(set(masks)) == 8
    assert all(m & (m - 1) == 0 for m in masks)
    assert sorted(masks) == masks


def test_ninth_view_opens_new_table():
    stack = TableStack()
    for _ in range(8):
        stack.view()
    view = stack.view()
    assert view.ident() == "COMPACT_TABLE_1"
    assert view.mask() == 1
    assert set(_parse(stack.render())) == {"COMPACT_TABLE_0", "COMPACT_TABLE_1"}


def test_flag_sets_bits_in_rendered_table():
    stack = TableStack()
    first = stack.view()
    second = stack.view()
    first.flag(ord("a"))
    second.flag(ord("a"))
    second.flag(ord("z"))
    table = _parse(stack.render())["COMPACT_TABLE_0"]
    assert len(table) == 256
    assert table[ord("a")] == first.mask() | second.mask()
    assert table[ord("z")] == second.mask()
    assert sum(1 for b in table if b) == 2
from notitlebar.parsers import (
    parse_cardinals,
    parse_client_list,
    parse_description_xid,
    parse_properties,
    parse_quoted_string,
    parse_tree_child,
)

TREE_OUTPUT = """
xwininfo: Window id: 0x55 (has no name)

  Root window id: 0x1e8 (the root window) (has no name)
  Parent window id: 0x1e8 (the root window) (has no name)
     1 child:
     0x99 "MyWindow": ("mywindow" "MyWindow")  800x600+0+0  +10+30
"""

FRAMELESS_OUTPUT = """
xwininfo: Window id: 0x3a00007 "MyWindow"

  Root window id: 0x1e8 (the root window) (has no name)
  Parent window id: 0x1e8 (the root window) (has no name)
     0 children.
"""

CHILDREN_OUTPUT = """
xwininfo: Window id: 0x55 (has no name)

  Root window id: 0x1e8 (the root window) (has no name)
  Parent window id: 0x1e8 (the root window) (has no name)
     2 children:
     0x101 (has no name): ()  1x1+0+0  +0+0
     0x102 "Other": ("other" "Other")  800x600+0+0  +10+30
"""


def test_description_xid():
    assert parse_description_xid("0xa1b2c3 Firefox") == "0xa1b2c3"
    assert parse_description_xid("Firefox") is None
    assert parse_description_xid("") is None
    assert parse_description_xid(None) is None


def test_tree_child_title_match():
    assert parse_tree_child(TREE_OUTPUT, "MyWindow") == "0x99"
    assert parse_tree_child(CHILDREN_OUTPUT, "Other") == "0x102"


def test_tree_child_frameless_header():
    assert parse_tree_child(FRAMELESS_OUTPUT, "MyWindow") == "0x3a00007"


def test_tree_child_first_child():
    assert parse_tree_child(TREE_OUTPUT, "Renamed") == "0x99"
    assert parse_tree_child(CHILDREN_OUTPUT, "") == "0x101"


def test_tree_child_nothing():
    assert parse_tree_child(FRAMELESS_OUTPUT, "Renamed") is None
    assert parse_tree_child("", "MyWindow") is None
    assert parse_tree_child("garbage", "MyWindow") is None


def test_tree_child_title_with_regex_chars():
    output = TREE_OUTPUT.replace("MyWindow", "a+b (1)")
    assert parse_tree_child(output, "a+b (1)") == "0x99"


def test_properties():
    output = """_MOTIF_WM_HINTS(_MOTIF_WM_HINTS) = 0x2, 0x0, 0x1, 0x0, 0x0
_NET_ACTIVE_WINDOW(WINDOW): window id # 0x2c00003
_NET_WM_NAME(UTF8_STRING) = "Terminal"
_GTK_HIDE_TITLEBAR_WHEN_MAXIMIZED:  not found.
this is not a property
"""
    assert parse_properties(output) == {
        "_MOTIF_WM_HINTS": "0x2, 0x0, 0x1, 0x0, 0x0",
        "_NET_ACTIVE_WINDOW": "0x2c00003",
        "_NET_WM_NAME": '"Terminal"',
    }
    assert parse_properties("") == {}


def test_cardinals():
    assert parse_cardinals("0x2, 0x0, 0x1, 0x0, 0x0") == [2, 0, 1, 0, 0]
    assert parse_cardinals("1") == [1]
    assert parse_cardinals("0x1, 12") == [1, 12]
    assert parse_cardinals("0x2, nope") is None
    assert parse_cardinals("") is None
    assert parse_cardinals(None) is None


def test_quoted_string():
    assert parse_quoted_string('"Terminal"') == "Terminal"
    assert parse_quoted_string(r'"say \"hi\""') == 'say "hi"'
    assert parse_quoted_string('"a", "b"') == "a"
    assert parse_quoted_string("0x1") is None
    assert parse_quoted_string(None) is None


def test_client_list():
    assert parse_client_list("_NET_CLIENT_LIST(WINDOW): window id # 0x1a00003, 0x2c00003\n") == ["0x1a00003", "0x2c00003"]
    assert parse_client_list("_NET_CLIENT_LIST:  not found.") == []
    assert parse_client_list("") == []

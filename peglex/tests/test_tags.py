import pytest

from peglex import char, lit, plus, alphanum, check, on_text


class TagStack:
    def __init__(self):
        self.stack = []
        self.max_depth = 0
        self.underflow = False
        self.wrong_tag = False

    def push(self, tag):
        self.stack.append(tag)
        self.max_depth = max(self.max_depth, len(self.stack))

    def pop(self, tag):
        if not self.stack:
            self.underflow = True
            self.wrong_tag = True
        elif self.stack[-1] != tag:
            self.wrong_tag = True
        else:
            self.stack.pop()


def tag_parser(tags: TagStack):
    name = plus(alphanum())
    return plus(
        # self-closing
        (char("<") & name & "/>")
        # opening, the lookahead keeps '>' out of the pushed name
        | (char("<") & on_text(name & check(">"), tags.push) & ">")
        # closing
        | (lit("</") & on_text(name & check(">"), tags.pop) & ">")
    )


@pytest.mark.parametrize("xml,underflow,wrong_tag,empty", [
    ("<tag1><tag2><tag3/><tag4/></tag2></tag1>", False, False, True),
    ("<tag1><tag2><tag3/><tag4/></tag1></tag2>", False, True, False),
    ("<tag1><tag2><tag3/><tag4/></tag2>", False, False, False),
    ("<tag1><tag2><tag3/><tag4/></tag2></tag1></tag0>", True, True, True),
])
def test_tag_stack(xml, underflow, wrong_tag, empty):
    tags = TagStack()
    ok, end = tag_parser(tags).match(xml)
    assert ok
    assert end == len(xml)
    assert tags.underflow is underflow
    assert tags.wrong_tag is wrong_tag
    assert (not tags.stack) is empty
    assert tags.max_depth == 2


def test_tag_pushes_and_pops_in_order():
    events = []
    tags = TagStack()
    original_push, original_pop = tags.push, tags.pop
    tags.push = lambda t: (events.append(("push", t)), original_push(t))
    tags.pop = lambda t: (events.append(("pop", t)), original_pop(t))

    tag_parser(tags).match("<tag1><tag2><tag3/><tag4/></tag2></tag1>")
    assert events == [
        ("push", "tag1"), ("push", "tag2"), ("pop", "tag2"), ("pop", "tag1"),
    ]

import json

import pytest

from cssbuilder import *


builder = css_selector_builder


# Lazy builder constructors, so each test run gets fresh instances.
def nested_combination():
    return builder.combine(
        builder.element("div").id("main").class_("container").class_("draggable"),
        "+",
        builder.combine(
            builder.element("table").id("data"),
            "~",
            builder.combine(
                builder.element("tr").pseudo_class("nth-of-type(even)"),
                " ",
                builder.element("td").pseudo_class("nth-of-type(even)"),
            ),
        ),
    )


@pytest.mark.parametrize(
    "make,expected",
    [
        (lambda: builder.element("div"), "div"),
        (lambda: builder.id("main"), "#main"),
        (lambda: builder.class_("container"), ".container"),
        (lambda: builder.attr("href"), "[href]"),
        (lambda: builder.pseudo_class("focus"), ":focus"),
        (lambda: builder.pseudo_element("after"), "::after"),
        (
            lambda: builder.id("main").class_("container").class_("editable"),
            "#main.container.editable",
        ),
        (
            lambda: builder.element("a").attr('href$=".png"').pseudo_class("focus"),
            'a[href$=".png"]:focus',
        ),
        (
            lambda: builder.element("div")
            .id("test")
            .class_("myClass")
            .attr("href")
            .pseudo_class("focus")
            .pseudo_element("after"),
            "div#test.myClass[href]:focus::after",
        ),
        (lambda: builder.class_("a").class_("b"), ".a.b"),
        (lambda: builder.attr("href").attr("title"), "[href][title]"),
        (
            lambda: builder.pseudo_class("first-child").pseudo_class("hover"),
            ":first-child:hover",
        ),
        (lambda: builder.element("p").pseudo_element("before"), "p::before"),
        (lambda: builder.id("nav").attr("data-open"), "#nav[data-open]"),
        (lambda: builder.element("li").class_("item"), "li.item"),
    ],
)
def test_stringify(make, expected):
    assert make().stringify() == expected


@pytest.mark.parametrize(
    "make,combinator,expected",
    [
        (lambda: (builder.element("div").id("main"), builder.element("table").id("data")),
         "+", "div#main + table#data"),
        (lambda: (builder.element("ul"), builder.element("li")), ">", "ul > li"),
        (lambda: (builder.element("h1"), builder.element("p")), "~", "h1 ~ p"),
        (lambda: (builder.element("nav"), builder.element("a")), " ", "nav   a"),
        (lambda: (builder.id("a"), builder.class_("b")), Combinator.CHILD, "#a > .b"),
        (lambda: (builder.id("a"), builder.class_("b")), Combinator.DESCENDANT, "#a   .b"),
        (lambda: (builder.id("a"), builder.class_("b")), Combinator.NEXT_SIBLING, "#a + .b"),
        (lambda: (builder.id("a"), builder.class_("b")), Combinator.SUBSEQUENT_SIBLING, "#a ~ .b"),
        (lambda: (builder.id("a"), builder.class_("b")), "||", "#a || .b"),
    ],
)
def test_combine(make, combinator, expected):
    left, right = make()
    assert builder.combine(left, combinator, right).stringify() == expected


def test_nested_combine():
    assert nested_combination().stringify() == (
        "div#main.container.draggable + table#data ~ "
        "tr:nth-of-type(even)   td:nth-of-type(even)"
    )


def test_combine_matches_operand_renderings():
    x = builder.element("a").class_("x")
    y = builder.element("b").attr("y")
    z = builder.pseudo_element("z")
    combined = builder.combine(builder.combine(x, "~", y), "+", z)
    assert combined.stringify() == "a.x ~ b[y] + ::z"


def test_combine_consumes_operands():
    left = builder.element("div")
    right = builder.element("span")
    builder.combine(left, ">", right)
    assert left.stringify() == ""
    assert right.stringify() == ""


@pytest.mark.parametrize(
    "make,exception",
    [
        (lambda: builder.element("div").element("span"), UniquenessError),
        (lambda: builder.id("a").id("b"), UniquenessError),
        (lambda: builder.pseudo_element("before").pseudo_element("after"), UniquenessError),
        (lambda: builder.class_("a").id("b"), OrderError),
        (lambda: builder.id("a").element("div"), OrderError),
        (lambda: builder.attr("href").class_("a"), OrderError),
        (lambda: builder.pseudo_class("focus").attr("href"), OrderError),
        (lambda: builder.pseudo_element("after").pseudo_class("focus"), OrderError),
        (lambda: builder.pseudo_element("after").element("div"), OrderError),
        (lambda: builder.element("div").class_("a").element("span"), OrderError),
    ],
)
def test_bad_sequence(make, exception):
    with pytest.raises(exception):
        make()


def test_errors_are_builder_exceptions():
    for exception in (OrderError, UniquenessError, InvalidStateError):
        assert issubclass(exception, SelectorBuilderException)


def test_error_attributes():
    with pytest.raises(OrderError) as excinfo:
        builder.class_("a").id("b")
    assert excinfo.value.category == Category.ID
    assert excinfo.value.previous == Category.CLASS
    assert "element, id, class, attribute, pseudo-class, pseudo-element" in str(
        excinfo.value
    )
    assert "id found after class" in str(excinfo.value)

    with pytest.raises(UniquenessError) as excinfo:
        builder.pseudo_element("before").pseudo_element("after")
    assert excinfo.value.category == Category.PSEUDO_ELEMENT
    assert "must not occur more than once" in str(excinfo.value)
    assert "pseudo-element" in str(excinfo.value)


def test_partial_state_kept_after_error():
    sel = builder.element("div").class_("a")
    with pytest.raises(OrderError):
        sel.id("b")
    assert sel.stringify() == "div.a"


def test_stringify_resets():
    sel = builder.element("div").id("main").class_("a")
    assert sel.stringify() == "div#main.a"
    assert sel.stringify() == ""
    # Order tracking is reset along with the parts.
    assert sel.element("span").id("x").stringify() == "span#x"


def test_combined_stringify_resets():
    combined = builder.combine(builder.element("a"), "+", builder.element("b"))
    assert combined.stringify() == "a + b"
    assert combined.stringify() == ""


def test_parts_on_combined_builder():
    combined = builder.combine(builder.element("a"), "+", builder.element("b"))
    with pytest.raises(InvalidStateError) as excinfo:
        combined.class_("c")
    assert excinfo.value.category == Category.CLASS
    assert combined.stringify() == "a + b"
    # Once rendered, the builder is empty again.
    assert combined.element("p").stringify() == "p"


def test_fresh_builders_are_independent():
    first = builder.element("div")
    second = builder.element("span")
    assert first is not second
    assert first.id("a").stringify() == "div#a"
    assert second.id("b").stringify() == "span#b"


def test_chaining_returns_same_instance():
    sel = SelectorBuilder()
    assert sel.element("div") is sel
    assert sel.id("main") is sel
    assert sel.class_("a") is sel
    assert sel.attr("href") is sel
    assert sel.pseudo_class("hover") is sel
    assert sel.pseudo_element("after") is sel
    assert sel.stringify() == "div#main.a[href]:hover::after"


def test_empty_builder():
    assert SelectorBuilder().stringify() == ""


def test_repr_does_not_consume():
    sel = builder.element("div").class_("a")
    assert repr(sel) == "<SelectorBuilder 'div.a'>"
    assert sel.stringify() == "div.a"
    combined = builder.combine(builder.id("x"), ">", builder.id("y"))
    assert repr(combined) == "<SelectorBuilder '#x > #y'>"
    assert combined.stringify() == "#x > #y"


def test_class_keyword_alias():
    assert getattr(builder, "class")("a").stringify() == ".a"
    assert getattr(builder.element("p"), "class")("b").stringify() == "p.b"


def test_module_level_shortcuts():
    sel = combine(
        element("div").id("main"),
        ">",
        class_("a").attr("b").pseudo_class("c").pseudo_element("d"),
    )
    assert sel.stringify() == "div#main > .a[b]:c::d"
    assert id_("x").stringify() == "#x"
    assert attr("x").stringify() == "[x]"
    assert pseudo_class("x").stringify() == ":x"
    assert pseudo_element("x").stringify() == "::x"


@pytest.mark.parametrize(
    "category,rank,unique,label",
    [
        (Category.ELEMENT, 1, True, "element"),
        (Category.ID, 2, True, "id"),
        (Category.CLASS, 3, False, "class"),
        (Category.ATTRIBUTE, 4, False, "attribute"),
        (Category.PSEUDO_CLASS, 5, False, "pseudo-class"),
        (Category.PSEUDO_ELEMENT, 6, True, "pseudo-element"),
    ],
)
def test_category(category, rank, unique, label):
    assert category.rank == rank
    assert category.unique is unique
    assert category.label == label


def test_rectangle():
    r = Rectangle(10, 20)
    assert r.width == 10
    assert r.height == 20
    assert r.area == 200
    assert r.get_area() == 200
    assert r == Rectangle(10, 20)
    assert r != Rectangle(20, 10)
    assert hash(r) == hash(Rectangle(10, 20))
    assert repr(r) == "Rectangle(width=10, height=20)"
    with pytest.raises(AttributeError):
        r.width = 5
    with pytest.raises(AttributeError):
        r.depth = 5


class Circle:
    def __init__(self, radius):
        self.radius = radius
        self._cache = None

    def get_circumference(self):
        return 2 * 3.14 * self.radius


@pytest.mark.parametrize(
    "obj,expected",
    [
        ([1, 2, 3], "[1,2,3]"),
        ({"height": 10, "width": 20}, '{"height":10,"width":20}'),
        ("abc", '"abc"'),
        (None, "null"),
        (True, "true"),
        ({"nested": {"list": [1, {"a": None}]}}, '{"nested":{"list":[1,{"a":null}]}}'),
        (Rectangle(10, 20), '{"width":10,"height":20}'),
        (Circle(10), '{"radius":10}'),
        ([Rectangle(1, 2)], '[{"width":1,"height":2}]'),
    ],
)
def test_to_json(obj, expected):
    assert to_json(obj) == expected


def test_to_json_unserializable():
    with pytest.raises(TypeError):
        to_json(object())
    with pytest.raises(TypeError):
        to_json({1, 2})


def test_from_json_with_constructor():
    circle = from_json(Circle, '{"radius":10}')
    assert isinstance(circle, Circle)
    assert circle.radius == 10

    r = from_json(Rectangle, '{ "width": 10, "height": 20 }')
    assert isinstance(r, Rectangle)
    assert r.get_area() == 200


def test_from_json_uses_document_order():
    r = from_json(Rectangle, '{"height": 10, "width": 20}')
    assert (r.width, r.height) == (10, 20)


def test_from_json_by_registered_name():
    r = from_json("Rectangle", to_json(Rectangle(3, 4)))
    assert r == Rectangle(3, 4)


def test_register_type():
    @register_type
    class Square:
        def __init__(self, side):
            self.side = side

    @register_type("point")
    def make_point(x, y):
        return (x, y)

    assert Square.__name__ == "Square"
    assert from_json("Square", '{"side": 4}').side == 4
    assert make_point(1, 2) == (1, 2)
    assert from_json("point", '{"x": 1, "y": 2}') == (1, 2)


def test_from_json_round_trip():
    original = Circle(2.5)
    restored = from_json(Circle, to_json(original))
    assert restored.radius == original.radius


@pytest.mark.parametrize("s", ["[10, 20]", "10", '"text"', "null"])
def test_from_json_not_an_object(s):
    with pytest.raises(ValueError):
        from_json(Rectangle, s)


def test_from_json_bad_input():
    with pytest.raises(json.JSONDecodeError):
        from_json(Rectangle, "{width: 10}")
    with pytest.raises(KeyError):
        from_json("Hexagon", '{"side": 1}')

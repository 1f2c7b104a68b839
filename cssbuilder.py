"""
:mod:`cssbuilder` is a fluent CSS selector builder, plus a couple of
small object and JSON helpers.

:mod:`cssbuilder`

- is a single module;
- has no dependency outside `PSL <https://docs.python.org/3/library/>`_;
- only *builds* selector strings, it does not parse or match them.

A complex selector is made of type, id, class, attribute, pseudo-class
and pseudo-element selectors, in that order::

    element#id.class[attr]:pseudoClass::pseudoElement
              \\----/\\----/\\----------/
              Can be several occurrences

Element, id and pseudo-element may occur at most once. Selectors can be
combined with the combinators ``' '``, ``'+'``, ``'~'`` and ``'>'``.

Simple example:

.. doctest::

   >>> from cssbuilder import css_selector_builder as builder
   >>> builder.id('main').class_('container').class_('editable').stringify()
   '#main.container.editable'
   >>> builder.element('a').attr('href$=".png"').pseudo_class('focus').stringify()
   'a[href$=".png"]:focus'
   >>> builder.combine(
   ...     builder.element('div').id('main').class_('container').class_('draggable'),
   ...     '+',
   ...     builder.combine(
   ...         builder.element('table').id('data'),
   ...         '~',
   ...         builder.combine(
   ...             builder.element('tr').pseudo_class('nth-of-type(even)'),
   ...             ' ',
   ...             builder.element('td').pseudo_class('nth-of-type(even)'),
   ...         ),
   ...     ),
   ... ).stringify()
   'div#main.container.draggable + table#data ~ tr:nth-of-type(even)   td:nth-of-type(even)'
"""

import json
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


__all__ = [
    "Category",
    "Combinator",
    "SelectorBuilderException",
    "OrderError",
    "UniquenessError",
    "InvalidStateError",
    "SelectorBuilder",
    "SelectorFactory",
    "css_selector_builder",
    "element",
    "id_",
    "class_",
    "attr",
    "pseudo_class",
    "pseudo_element",
    "combine",
    "Rectangle",
    "to_json",
    "from_json",
    "register_type",
]


CombinatorLike = Union[str, "Combinator"]


# Enum: member values double as ranks, so ordering checks compare values.
class Category(Enum):
    """
    Kinds of simple selector, valued by their rank in a sequence.

    Members correspond to the following simple selectors:

    - :attr:`ELEMENT`: ``tag``;
    - :attr:`ID`: ``#id``;
    - :attr:`CLASS`: ``.class``;
    - :attr:`ATTRIBUTE`: ``[attr]``;
    - :attr:`PSEUDO_CLASS`: ``:pseudo-class``;
    - :attr:`PSEUDO_ELEMENT`: ``::pseudo-element``.
    """

    ELEMENT = 1
    ID = 2
    CLASS = 3
    ATTRIBUTE = 4
    PSEUDO_CLASS = 5
    PSEUDO_ELEMENT = 6

    @property
    def rank(self) -> int:
        return self.value

    @property
    def unique(self) -> bool:
        """Whether the category may occur at most once in a sequence."""
        return self in _UNIQUE_CATEGORIES

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


_UNIQUE_CATEGORIES = frozenset(
    (Category.ELEMENT, Category.ID, Category.PSEUDO_ELEMENT)
)


class Combinator(Enum):
    """
    Combinator types.

    Members correspond to the following combinators:

    - :attr:`DESCENDANT`: ``A B``;
    - :attr:`CHILD`: ``A > B``;
    - :attr:`NEXT_SIBLING`: ``A + B``;
    - :attr:`SUBSEQUENT_SIBLING`: ``A ~ B``.
    """

    DESCENDANT = " "
    CHILD = ">"
    NEXT_SIBLING = "+"
    SUBSEQUENT_SIBLING = "~"


class SelectorBuilderException(Exception):
    """
    Base class of exceptions raised when a selector is built in an
    invalid sequence.

    Attributes:
        category (:class:`Category`):
            Category of the offending call.
    """

    message = "invalid selector construction"

    def __init__(self, category: Category) -> None:
        super().__init__(category)
        self.category = category

    def __str__(self) -> str:
        return "%s (offending part: %s)" % (self.message, self.category.label)


class OrderError(SelectorBuilderException):
    """
    Raised when a selector part comes after a part of a later category.

    Attributes:
        category (:class:`Category`):
            Category of the offending call.
        previous (:class:`Category`):
            Category of the call preceding it.
    """

    message = (
        "selector parts must appear in order: "
        "element, id, class, attribute, pseudo-class, pseudo-element"
    )

    def __init__(self, category: Category, previous: Category) -> None:
        super().__init__(category)
        self.previous = previous

    def __str__(self) -> str:
        return "%s (%s found after %s)" % (
            self.message,
            self.category.label,
            self.previous.label,
        )


class UniquenessError(SelectorBuilderException):
    """Raised when an element, id or pseudo-element is given twice."""

    message = "element, id, and pseudo-element must not occur more than once"


class InvalidStateError(SelectorBuilderException):
    """Raised when a part is added to a builder holding a combination."""

    message = "cannot add selector parts to a combined selector"


class SelectorBuilder:
    """
    Builds one CSS complex selector.

    Parts are added with :meth:`element`, :meth:`id`, :meth:`class_`,
    :meth:`attr`, :meth:`pseudo_class` and :meth:`pseudo_element`, each
    of which returns the builder itself so calls can be chained. Parts
    must be added in that order, and element, id and pseudo-element at
    most once; violations raise :class:`OrderError` and
    :class:`UniquenessError` right at the offending call.

    :meth:`stringify` renders the selector and resets the builder, so
    the same instance can then be reused from scratch.

    Attributes:
        tag            (:class:`Optional`\\[:class:`str`])
        id_            (:class:`Optional`\\[:class:`str`])
        classes        (:class:`List`\\[:class:`str`])
        attrs          (:class:`List`\\[:class:`str`])
        pseudo_classes (:class:`List`\\[:class:`str`])
        pseudo_elem    (:class:`Optional`\\[:class:`str`])

    Each attribute holds the rendered form of its parts, e.g. ``#main``
    rather than ``main``.
    """

    def __init__(self) -> None:
        self._reset()
        self._combined = None  # type: Optional[str]

    def _reset(self) -> None:
        self.tag = None  # type: Optional[str]
        self.id_ = None  # type: Optional[str]
        self.classes = []  # type: List[str]
        self.attrs = []  # type: List[str]
        self.pseudo_classes = []  # type: List[str]
        self.pseudo_elem = None  # type: Optional[str]
        self._last_rank = 0

    def __repr__(self) -> str:
        return "<SelectorBuilder %s>" % repr(self._render())

    def element(self, value: str) -> "SelectorBuilder":
        self._check(Category.ELEMENT)
        self.tag = value
        return self

    def id(self, value: str) -> "SelectorBuilder":
        self._check(Category.ID)
        self.id_ = "#%s" % value
        return self

    def class_(self, value: str) -> "SelectorBuilder":
        self._check(Category.CLASS)
        self.classes.append(".%s" % value)
        return self

    def attr(self, value: str) -> "SelectorBuilder":
        """
        Adds an attribute selector.

        `value` is the raw body of the selector, e.g. ``href$=".png"``;
        it is wrapped in brackets but otherwise not checked.
        """
        self._check(Category.ATTRIBUTE)
        self.attrs.append("[%s]" % value)
        return self

    def pseudo_class(self, value: str) -> "SelectorBuilder":
        self._check(Category.PSEUDO_CLASS)
        self.pseudo_classes.append(":%s" % value)
        return self

    def pseudo_element(self, value: str) -> "SelectorBuilder":
        self._check(Category.PSEUDO_ELEMENT)
        self.pseudo_elem = "::%s" % value
        return self

    def combine(
        self,
        left: "SelectorBuilder",
        combinator: CombinatorLike,
        right: "SelectorBuilder",
    ) -> "SelectorBuilder":
        """
        Makes this builder hold ``left`` and ``right`` joined by
        `combinator`.

        Both operands are rendered (and thereby reset) immediately. The
        combinator is placed between single spaces whatever it is, so
        the descendant combinator ``' '`` ends up as three spaces. Any
        string is accepted as combinator; :class:`Combinator` members
        contribute their token.
        """
        if isinstance(combinator, Combinator):
            combinator = combinator.value
        self._combined = "%s %s %s" % (left.stringify(), combinator, right.stringify())
        return self

    def stringify(self) -> str:
        """
        Renders the selector and resets the builder.

        A second call without adding parts in between returns ``''``.
        """
        s = self._render()
        self._combined = None
        self._reset()
        return s

    def _render(self) -> str:
        if self._combined is not None:
            return self._combined
        s = ""
        if self.tag:
            s += self.tag
        if self.id_:
            s += self.id_
        s += "".join(self.classes)
        s += "".join(self.attrs)
        s += "".join(self.pseudo_classes)
        if self.pseudo_elem:
            s += self.pseudo_elem
        return s

    def _check(self, category: Category) -> None:
        if self._combined is not None:
            raise InvalidStateError(category)
        if category.rank < self._last_rank:
            raise OrderError(category, Category(self._last_rank))
        if category.rank == self._last_rank and category.unique:
            raise UniquenessError(category)
        self._last_rank = category.rank


class SelectorFactory:
    """
    Entry point for building selectors.

    Every method returns a new :class:`SelectorBuilder` seeded with the
    corresponding call, so independent selectors never share state.
    ``class`` being a keyword, the class selector method is spelled
    :meth:`class_`; ``getattr(factory, 'class')`` works as well.
    """

    def element(self, value: str) -> SelectorBuilder:
        return SelectorBuilder().element(value)

    def id(self, value: str) -> SelectorBuilder:
        return SelectorBuilder().id(value)

    def class_(self, value: str) -> SelectorBuilder:
        return SelectorBuilder().class_(value)

    def attr(self, value: str) -> SelectorBuilder:
        return SelectorBuilder().attr(value)

    def pseudo_class(self, value: str) -> SelectorBuilder:
        return SelectorBuilder().pseudo_class(value)

    def pseudo_element(self, value: str) -> SelectorBuilder:
        return SelectorBuilder().pseudo_element(value)

    def combine(
        self, left: SelectorBuilder, combinator: CombinatorLike, right: SelectorBuilder
    ) -> SelectorBuilder:
        return SelectorBuilder().combine(left, combinator, right)


setattr(SelectorFactory, "class", SelectorFactory.class_)
setattr(SelectorBuilder, "class", SelectorBuilder.class_)


css_selector_builder = SelectorFactory()

element = css_selector_builder.element
id_ = css_selector_builder.id
class_ = css_selector_builder.class_
attr = css_selector_builder.attr
pseudo_class = css_selector_builder.pseudo_class
pseudo_element = css_selector_builder.pseudo_element
combine = css_selector_builder.combine


# Constructors available to from_json by name.
_TYPE_REGISTRY = {}  # type: Dict[str, Callable[..., Any]]


def register_type(cls_or_name: Union[str, Callable[..., Any]]) -> Any:
    """
    Registers a constructor for :func:`from_json`.

    Use as a plain decorator to register under the class name::

        @register_type
        class Circle:
            ...

    or with an explicit name::

        @register_type("circle")
        def make_circle(radius):
            ...

    The decorated object is returned unchanged.
    """
    if isinstance(cls_or_name, str):
        name = cls_or_name

        def decorator(constructor: Callable[..., Any]) -> Callable[..., Any]:
            _TYPE_REGISTRY[name] = constructor
            return constructor

        return decorator
    _TYPE_REGISTRY[cls_or_name.__name__] = cls_or_name
    return cls_or_name


@register_type
class Rectangle:
    """
    Immutable rectangle.

    Attributes:
        width  (:class:`float`)
        height (:class:`float`)
    """

    __slots__ = ("_width", "_height")

    def __init__(self, width: float, height: float) -> None:
        self._width = width
        self._height = height

    def __repr__(self) -> str:
        return "Rectangle(width=%r, height=%r)" % (self._width, self._height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rectangle):
            return NotImplemented
        return (self._width, self._height) == (other._width, other._height)

    def __hash__(self) -> int:
        return hash((self._width, self._height))

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def area(self) -> float:
        return self._width * self._height

    def get_area(self) -> float:
        """Alias of :attr:`area`."""
        return self.area

    def to_json_dict(self) -> Dict[str, float]:
        return {"width": self._width, "height": self._height}


def _json_default(obj: Any) -> Any:
    if hasattr(obj, "to_json_dict"):
        return obj.to_json_dict()
    try:
        attrs = vars(obj)
    except TypeError:
        raise TypeError(
            "object of type %s is not JSON serializable" % type(obj).__name__
        )
    return {key: val for key, val in attrs.items() if not key.startswith("_")}


def to_json(obj: Any) -> str:
    """
    Returns the compact JSON representation of `obj`.

    The output has no insignificant whitespace, e.g. ``[1, 2, 3]``
    becomes ``'[1,2,3]'``. Objects JSON has no notion of are serialized
    through their ``to_json_dict()`` method if they have one, otherwise
    through their public instance attributes.
    """
    return json.dumps(obj, separators=(",", ":"), default=_json_default)


def from_json(target: Union[str, Callable[..., Any]], s: str) -> Any:
    """
    Reconstructs an object of type `target` from its JSON
    representation.

    `s` must hold a JSON object; its values are passed to the
    constructor positionally, in document order.

    Args:
        target: constructor to call, or the name it was registered
                under with :func:`register_type`
        s:      JSON document

    Returns:
        The constructed object.
    """
    if isinstance(target, str):
        try:
            constructor = _TYPE_REGISTRY[target]
        except KeyError:
            raise KeyError("no type registered under name %s" % repr(target))
    else:
        constructor = target
    obj = json.loads(s)
    if not isinstance(obj, dict):
        raise ValueError("not a JSON object: %s" % repr(s))
    return constructor(*obj.values())

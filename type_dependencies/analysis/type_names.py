"""
Type-name canonicalisation for extractor output.

Names reaching the graph are fully-qualified, use ``+`` between a
nested type and its parent, drop generic instantiation arguments
(``List`1<Foo>`` -> ``List`1``) and keep the ``[]``, ``*`` and ``&``
suffix markers of arrays, pointers and by-reference types.
"""

from collections.abc import Iterable

DEFAULT_FRAMEWORK_NAMESPACES = ("System", "Microsoft")

_SUFFIX_MARKERS = ("[]", "*", "&")


def _strip_assembly_qualifier(name: str) -> str:
    """Cut at the first comma outside generic brackets."""
    depth = 0
    for index, char in enumerate(name):
        if char in "<[":
            depth += 1
        elif char in ">]":
            depth -= 1
        elif char == "," and depth == 0:
            return name[:index]
    return name


def _split_suffix_markers(name: str) -> tuple[str, str]:
    markers: list[str] = []
    while True:
        for marker in _SUFFIX_MARKERS:
            if name.endswith(marker) and len(name) > len(marker):
                markers.append(marker)
                name = name[: -len(marker)]
                break
        else:
            break
    return name, "".join(reversed(markers))


def _strip_generic_arguments(name: str) -> str:
    tick = name.find("`")
    if tick < 0:
        angle = name.find("<")
        return name[:angle] if angle > 0 else name
    for index in range(tick, len(name)):
        if name[index] in "<[":
            return name[:index]
    return name


def normalize_type_name(raw_name: str | None) -> str:
    """Return the canonical graph identifier for an extractor type name.

    Blank input yields an empty string, which the graph ignores.
    """
    if raw_name is None:
        return ""
    name = _strip_assembly_qualifier(raw_name.strip()).strip()
    name = name.replace("/", "+")
    element, markers = _split_suffix_markers(name)
    return _strip_generic_arguments(element) + markers


def get_namespace(type_name: str) -> str:
    outer = type_name.split("+", 1)[0]
    dot = outer.rfind(".")
    return outer[:dot] if dot > 0 else ""


def is_framework_type(
    type_name: str,
    framework_namespaces: Iterable[str] = DEFAULT_FRAMEWORK_NAMESPACES,
) -> bool:
    """True for types owned by the runtime framework (``System``, ``Microsoft``...)."""
    namespace = get_namespace(type_name)
    for prefix in framework_namespaces:
        if namespace.startswith(prefix) or type_name.startswith(prefix + "."):
            return True
    return False


def is_anonymous_type(type_name: str) -> bool:
    """Compiler-generated names start with ``<``."""
    return type_name.startswith("<")

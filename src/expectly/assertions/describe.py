"""Human-readable rendering of arbitrary values for diagnostics."""

from typing import Any

NIL_DESCRIPTION = "[nil] nil"


def type_tag(value: Any) -> str:
    """Return the type name used in diagnostics (``int``, ``pkg.mod.Model``)."""
    cls = type(value)
    module = getattr(cls, "__module__", None)
    name = getattr(cls, "__qualname__", cls.__name__)
    if not module or module == "builtins":
        return name
    return f"{module}.{name}"


def _truncate(text: str, max_len: int | None) -> str:
    if max_len is None or len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def render(value: Any, max_length: int | None = None) -> str:
    """Render ``value`` with ``repr``; never raises."""
    try:
        text = repr(value)
    except Exception as e:
        text = f"<unrepresentable: {type(e).__name__}>"
    return _truncate(text, max_length)


def describe(value: Any, max_length: int | None = None) -> str:
    """Describe a value as ``[<type>] <rendered-value>``.

    ``None`` is described as ``[nil] nil``.
    """
    if value is None:
        return NIL_DESCRIPTION
    return f"[{type_tag(value)}] {render(value, max_length)}"

"""
The extension merge engine. Groups carry a free-form, schema-less `extension`
map; these functions update it either at a nested key path or by replacing
top-level keys.
"""

from collections.abc import Mapping, Sequence

from pydantic import JsonValue

ExtensionMap = dict[str, JsonValue]


class InvalidExtensionPath(ValueError):
    pass


def parse_path(path: str, delimiter: str = "/") -> tuple[str, ...]:
    """
    Split a delimited path string (e.g. `acls/admin`) into its segments.

    Parameters
    ----------
    path: str
        The delimited path.
    delimiter: str
        The segment delimiter, `/` by default.

    Raises
    ------
    InvalidExtensionPath
        If the path is empty or any segment is empty (leading, trailing, or
        doubled delimiters).
    """
    segments = tuple(path.split(delimiter))

    if not all(segments):
        raise InvalidExtensionPath(
            f"Extension path {path!r} contains an empty segment"
        )

    return segments


def assign_by_path(
    root: ExtensionMap, path: Sequence[str], value: JsonValue
) -> ExtensionMap:
    """
    Assign `value` at the nested location `path` inside `root`.

    Intermediate keys that are missing, or that hold something other than a
    mapping, are replaced by a fresh mapping; the previous value is discarded.
    The final key is assigned verbatim. `root` is mutated in place and
    returned, so copy it first if the original must survive.

    Parameters
    ----------
    root: ExtensionMap
        The map to update.
    path: Sequence[str]
        Ordered, non-empty sequence of keys.
    value: JsonValue
        The value to place at the final key.

    Raises
    ------
    InvalidExtensionPath
        If `path` is empty.
    """
    if not path:
        raise InvalidExtensionPath("Extension path must have at least one segment")

    node = root

    for key in path[:-1]:
        child = node.get(key)

        if not isinstance(child, dict):
            child = {}
            node[key] = child

        node = child

    node[path[-1]] = value

    return root


def merge_top_level(
    root: ExtensionMap, update: Mapping[str, JsonValue]
) -> ExtensionMap:
    """
    Replace each top-level key of `root` with the value from `update`. This is
    not a deep merge: nested content under a supplied key is overwritten
    wholesale, while keys not named in `update` are left alone.
    """
    for key, value in update.items():
        root[key] = value

    return root

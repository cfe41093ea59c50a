# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Flatten a resolved document into environment-variable style names.

``{"opts": {"git": {"branch": "main"}}}`` becomes
``{"mutato_opts__git__branch": "main"}``. Build stages receive the resolved
configuration this way.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Tuple

PATH_SEPARATOR = "__"


def _leaf_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _walk(value: Any, path: Tuple[str, ...]) -> Iterator[Tuple[Tuple[str, ...], str]]:
    if isinstance(value, dict):
        for key, child in value.items():
            yield from _walk(child, path + (str(key),))
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            yield from _walk(child, path + (str(index),))
    elif isinstance(value, (str, int, float, bool)) or value is None:
        yield path, _leaf_to_str(value)
    else:
        raise TypeError(
            f"Unsupported value of type {type(value).__name__} at "
            f"'{PATH_SEPARATOR.join(path)}'"
        )


def to_environment_map(value: Any, prefix: str = "mutato") -> Dict[str, str]:
    """Return a flat ``name -> string`` mapping of every leaf in *value*.

    Containers contribute only their children, so empty mappings and
    sequences produce no entries. A scalar root maps to the bare *prefix*.
    """
    result: Dict[str, str] = {}
    for path, leaf in _walk(value, ()):
        name = f"{prefix}_{PATH_SEPARATOR.join(path)}" if path else prefix
        result[name] = leaf
    return result

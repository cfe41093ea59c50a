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

"""Duration parsing for subprocess timeouts.

Timeouts may be given as plain seconds (``10``, ``2.5``) or as a string with
a unit suffix, matching the ``preprocessor.timeout`` setting:

  * ``ms`` milliseconds
  * ``s``  seconds (also the unit of a bare number string, ``"10"``)
  * ``m``  minutes
  * ``h``  hours
"""

from __future__ import annotations

import re
from typing import Union

DEFAULT_TIMEOUT = "10s"

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(ms|s|m|h)?$")

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

Duration = Union[int, float, str]


def parse_duration(raw: Duration) -> float:
    """Convert *raw* into a positive number of seconds.

    Raises:
        ValueError: If the value cannot be parsed or is not positive.
    """
    if isinstance(raw, bool):
        raise ValueError(f"Duration must be a number or string, got bool: {raw!r}")

    if isinstance(raw, (int, float)):
        seconds = float(raw)
    elif isinstance(raw, str):
        m = _DURATION_RE.match(raw.strip().lower())
        if m is None:
            raise ValueError(
                f"Invalid duration string: '{raw}'. "
                "Expected a number followed by ms, s, m or h (e.g. '10s')."
            )
        seconds = float(m.group(1)) * _UNIT_SECONDS[m.group(2) or "s"]
    else:
        raise ValueError(
            f"Duration must be a number or string, got {type(raw).__name__}: {raw!r}"
        )

    if seconds <= 0:
        raise ValueError(f"Duration must be positive, got {raw!r}")
    return seconds

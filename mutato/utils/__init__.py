"""Small helpers shared across mutato modules."""

from .duration import DEFAULT_TIMEOUT, parse_duration
from .flatten import to_environment_map

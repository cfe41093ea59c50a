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

"""Configuration management for the mutato pipeline."""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..utils.duration import DEFAULT_TIMEOUT
from ..utils.logging_utils import configure_split_stream_logging


@dataclass
class PipelineConfig:
    """Configuration class for the mutato resolution pipeline."""
    preprocessor_timeout: Union[int, float, str] = DEFAULT_TIMEOUT
    schema_path: Optional[str] = None
    log_level: str = "INFO"
    print_level: str = "ERROR"

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Create configuration from environment variables."""
        return cls(
            preprocessor_timeout=os.getenv('MUTATO_PREPROCESSOR_TIMEOUT', DEFAULT_TIMEOUT),
            schema_path=os.getenv('MUTATO_SCHEMA_PATH') or None,
            log_level=os.getenv('MUTATO_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('MUTATO_PRINT_LEVEL', 'ERROR'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

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

"""Template rendering for mutato documents.

Documents are Jinja2 templates rendered in strict, asynchronous mode. Besides
the caller's context two built-ins are always available:

  * ``env("NAME")``: value of a process environment variable ("" if unset)
  * ``cmd("shell command")``: trimmed stdout of a shell command, bounded by
    the renderer timeout
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import signal
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from jinja2 import Environment, StrictUndefined, Undefined
from jinja2.exceptions import TemplateError, TemplateSyntaxError, UndefinedError

from ..exceptions import (
    BadBuiltinArgumentError,
    BuiltinExecutionError,
    MalformedExpressionError,
    RenderError,
    SourceUnavailableError,
    UndefinedReferenceError,
)
from ..utils.duration import DEFAULT_TIMEOUT, Duration, parse_duration

logger = logging.getLogger(__name__)

BUILTIN_NAMES = ("env", "cmd")

_UNDEFINED_NAME_RE = re.compile(r"^'(?P<name>[^']+)' is undefined$")


def _describe_argument(value: Any) -> str:
    if isinstance(value, Undefined):
        return "an undefined name"
    return f"{type(value).__name__} {value!r}"


def _single_string_argument(builtin: str, args: tuple, kwargs: dict) -> str:
    if kwargs:
        raise BadBuiltinArgumentError(
            f"{builtin}() does not accept keyword arguments, got: {', '.join(sorted(kwargs))}",
            builtin,
        )
    if len(args) != 1:
        raise BadBuiltinArgumentError(
            f"{builtin}() takes exactly one string argument ({len(args)} given)",
            builtin,
        )
    value = args[0]
    if not isinstance(value, str):
        raise BadBuiltinArgumentError(
            f"{builtin}() argument must be a string literal, got {_describe_argument(value)}",
            builtin,
        )
    return value


def _kill_process_tree(proc: asyncio.subprocess.Process) -> None:
    try:
        if sys.platform != "win32":
            # the shell runs in its own session, so its pid is the group id
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass


async def run_shell_command(command: str, timeout: float) -> str:
    """Run *command* through the platform shell and return its trimmed stdout.

    If the awaiting task is cancelled the process is killed and reaped before
    the cancellation propagates.

    Raises:
        BuiltinExecutionError: On a non-zero exit code or when *timeout*
            seconds elapse. A timed out process is killed and reaped first.
    """
    logger.debug("Running shell command (timeout=%ss): %s", timeout, command)

    kwargs: Dict[str, Any] = {}
    if sys.platform != "win32":
        kwargs["start_new_session"] = True

    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **kwargs,
        )
    except OSError as exc:
        raise BuiltinExecutionError(
            f"cmd(\"{command}\") could not be started: {exc}", command
        ) from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        _kill_process_tree(proc)
        await proc.wait()
        logger.warning("Shell command timed out after %ss: %s", timeout, command)
        raise BuiltinExecutionError(
            f"cmd(\"{command}\") timed out after {timeout:g}s",
            command,
            returncode=proc.returncode,
            timed_out=True,
        ) from None
    except BaseException:
        # cancelled while waiting
        _kill_process_tree(proc)
        if proc.returncode is None:
            await proc.wait()
        raise

    err_text = stderr.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        logger.warning("Shell command exited with code %s: %s", proc.returncode, command)
        message = f"cmd(\"{command}\") exited with code {proc.returncode}"
        if err_text:
            message += f": {err_text}"
        raise BuiltinExecutionError(message, command, returncode=proc.returncode, stderr=err_text)

    return stdout.decode("utf-8", errors="replace").rstrip()


class TemplateRenderer:
    """Renders mutato document templates.

    The renderer keeps no per-call state, so one instance may serve many
    concurrent renders.
    """

    def __init__(self, timeout: Duration = DEFAULT_TIMEOUT):
        self.timeout = parse_duration(timeout)
        self.env = Environment(
            undefined=StrictUndefined,
            enable_async=True,
            keep_trailing_newline=True,
            newline_sequence="\n",
            autoescape=False,
        )

    def _builtins(self, timeout: float) -> Dict[str, Any]:
        def env(*args, **kwargs) -> str:
            name = _single_string_argument("env", args, kwargs)
            return os.environ.get(name, "")

        async def cmd(*args, **kwargs) -> str:
            command = _single_string_argument("cmd", args, kwargs)
            return await run_shell_command(command, timeout)

        return {"env": env, "cmd": cmd}

    async def render(
        self,
        template: str,
        context: Optional[Mapping[str, Any]] = None,
        timeout: Optional[Duration] = None,
    ) -> str:
        """Render *template* with *context*.

        Every ``{{ }}`` expression is replaced in place; on any failure
        nothing is returned.

        Raises:
            UndefinedReferenceError: A name is missing from *context*.
            BadBuiltinArgumentError: ``env``/``cmd`` called incorrectly.
            BuiltinExecutionError: ``cmd`` failed or timed out.
            MalformedExpressionError: Template syntax error.
            RenderError: Any other failure while evaluating an expression.
        """
        effective_timeout = self.timeout if timeout is None else parse_duration(timeout)

        variables: Dict[str, Any] = dict(context or {})
        shadowed = [name for name in BUILTIN_NAMES if name in variables]
        if shadowed:
            logger.warning("Context keys %s are reserved for built-ins and are ignored", shadowed)
        variables.update(self._builtins(effective_timeout))

        try:
            compiled = self.env.from_string(template)
        except TemplateSyntaxError as exc:
            raise MalformedExpressionError(
                f"Malformed template expression at line {exc.lineno}: {exc.message}",
                line=exc.lineno,
            ) from exc

        try:
            return await compiled.render_async(variables)
        except RenderError:
            raise
        except UndefinedError as exc:
            m = _UNDEFINED_NAME_RE.match(str(exc))
            name = m.group("name") if m else None
            raise UndefinedReferenceError(
                f"Undefined template variable: {name or exc}", name=name
            ) from exc
        except TemplateSyntaxError as exc:
            raise MalformedExpressionError(
                f"Malformed template expression at line {exc.lineno}: {exc.message}",
                line=exc.lineno,
            ) from exc
        except TemplateError as exc:
            raise RenderError(f"Failed to render template: {exc}") from exc
        except Exception as exc:
            raise RenderError(f"Failed to evaluate template expression: {exc}") from exc

    async def render_file(
        self,
        path: Union[str, Path],
        context: Optional[Mapping[str, Any]] = None,
        timeout: Optional[Duration] = None,
    ) -> str:
        """Read *path* and render its contents."""
        text = await read_source(path)
        return await self.render(text, context, timeout)


async def read_source(path: Union[str, Path]) -> str:
    """Read a UTF-8 document without blocking the event loop.

    Raises:
        SourceUnavailableError: If the file is missing or cannot be read.
    """
    file_path = Path(path)
    logger.debug("Reading document: %s", file_path)
    try:
        return await asyncio.to_thread(file_path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnavailableError(
            f"Cannot read document {file_path}: {exc}", path=str(file_path)
        ) from exc

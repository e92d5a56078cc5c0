# deno_runtime.py

import asyncio
import collections.abc
import logging
import os
import shlex
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from deno_babel.deno_assembler import assemble, variable_assignments
from deno_babel.deno_config import Settings, load_settings, VARIABLE_PREFIXES
from deno_babel.deno_datatypes import (
    Binding, DenoBabelError, ExecutionParams, SessionNotSupported, make_binding,
)
from deno_babel.deno_permissions import permission_flags
from deno_babel.deno_serialize import deserialize
from deno_babel.deno_splitter import split

logger = logging.getLogger(__name__)

RESULT_TYPES = ("value", "output")

# Result params that ask for the interpreter's text untouched.
RAW_RESULT_PARAMS = frozenset({"scalar", "verbatim", "raw", "html", "code", "pp", "file"})


# ===================================================================
# 1. Process environment
# ===================================================================

def no_color_env(var: str = "NO_COLOR", base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Return a copy of the environment with `var` switched on, for a child process.

    `os.environ` itself is left untouched.
    """
    env = dict(os.environ if base is None else base)
    env[var] = "true"
    return env


# ===================================================================
# 2. Parameter normalization
# ===================================================================

def _pairs(raw: Any) -> List[Tuple[str, Any]]:
    if raw is None:
        return []
    if isinstance(raw, collections.abc.Mapping):
        return [(str(k), v) for k, v in raw.items()]
    pairs = []
    for entry in raw:
        name, value = entry
        pairs.append((str(name), value))
    return pairs


def _field_names_for(colnames: Any, name: str) -> List[str]:
    match colnames:
        case None:
            return []
        case collections.abc.Mapping():
            return list(colnames.get(name) or [])
        case str():
            return [colnames]
        case _:
            entries = list(colnames)
            # alist form: [(name, [fields...]), ...]
            if entries and all(isinstance(e, (list, tuple)) and len(e) == 2
                               and isinstance(e[1], (list, tuple)) for e in entries):
                return list(dict((str(k), v) for k, v in entries).get(name) or [])
            return [str(e) for e in entries]


def _result_params(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split()
    return [str(p) for p in raw]


# ===================================================================
# 3. Results
# ===================================================================

@dataclass
class ExecutionResult:
    """The structured result of running one code block."""
    status: Literal['success', 'error']
    value: Any = None
    output: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    error_message: Optional[str] = None
    script: str = ""

    def format_error(self) -> str:
        if self.status != 'error':
            return ""
        msg = str(self.error_message or "Unknown error")
        if self.returncode is not None and not msg.startswith("deno exited"):
            return f"deno exited with status {self.returncode}: {msg}"
        return msg


# ===================================================================
# 4. Runner
# ===================================================================

class ScriptRunner:
    """Assembles, executes and decodes Deno code blocks."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    @property
    def settings(self) -> Settings:
        # Read at call time so configuration changes apply to the next block.
        return self._settings if self._settings is not None else load_settings()

    def prep_session(self, session: Any = None, params: Optional[Mapping[str, Any]] = None):
        raise SessionNotSupported(session)

    def normalize_params(self, params: Optional[Mapping[str, Any]] = None,
                         settings: Optional[Settings] = None) -> ExecutionParams:
        params = dict(params or {})
        settings = settings or self.settings

        session = params.get("session")
        if session not in (None, "none"):
            raise SessionNotSupported(session)

        result_type = params.get("result-type") or "value"
        if result_type not in RESULT_TYPES:
            raise DenoBabelError(f"result-type must be 'value' or 'output', got {result_type!r}")

        prefix = params.get("prefix") or settings.variable_prefix
        if prefix not in VARIABLE_PREFIXES:
            raise DenoBabelError(f"prefix must be one of {', '.join(VARIABLE_PREFIXES)}, got {prefix!r}")

        colnames = params.get("colname-names")
        bindings: List[Binding] = [
            make_binding(name, value, _field_names_for(colnames, name))
            for name, value in _pairs(params.get("var"))
        ]

        allow = params.get("allow")
        return ExecutionParams(
            cmd=params.get("cmd") or settings.command,
            result_type=result_type,
            bindings=bindings,
            allow=[allow] if isinstance(allow, str) else list(allow or []),
            result_params=_result_params(params.get("result-params")),
            prefix=prefix,
        )

    def _assemble(self, body: str, p: ExecutionParams) -> str:
        imports, rest = split(body)
        declarations = variable_assignments(p.bindings, p.prefix)
        return assemble(imports, declarations, rest, wrap_value=p.wrap_value)

    def expand_body(self, body: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Return the full script a block would run, without running it."""
        return self._assemble(body, self.normalize_params(params))

    def command_line(self, p: ExecutionParams, script_path: str) -> List[str]:
        try:
            cmd = shlex.split(p.cmd)
        except ValueError as e:
            raise DenoBabelError(f"invalid cmd {p.cmd!r}: {e}") from e
        if not cmd:
            raise DenoBabelError("cmd must not be empty")
        return cmd + permission_flags(p.allow) + [script_path]

    async def _invoke(self, argv: List[str], timeout: Optional[float] = None,
                      env: Optional[Mapping[str, str]] = None) -> Tuple[int, str, str]:
        """Run `argv` with no stdin and return (returncode, stdout, stderr)."""
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=None if env is None else dict(env),
        )
        try:
            out, err = await asyncio.wait_for(proc.communicate(), timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise
        return (
            proc.returncode,
            (out or b"").decode("utf-8", errors="replace"),
            (err or b"").decode("utf-8", errors="replace"),
        )

    async def handle_script(self, body: str, params: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        """
        Execute one code block.

        Interpreter failures are not raised: the captured text becomes the
        result value and `status` is set to 'error'. Parameter problems
        (sessions, unknown result types or prefixes, an unparsable cmd)
        raise DenoBabelError.
        """
        settings = self.settings
        p = self.normalize_params(params, settings)
        script = self._assemble(body, p)

        fd, path = tempfile.mkstemp(prefix="deno-babel-", suffix=settings.script_suffix)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(script)
            argv = self.command_line(p, path)
            logger.debug("running %s", shlex.join(argv))
            env = no_color_env(settings.no_color_var)
            try:
                returncode, out, err = await self._invoke(argv, settings.timeout, env)
            except FileNotFoundError as e:
                logger.warning("interpreter not found: %s", e)
                return ExecutionResult('error', value=str(e), error_message=str(e), script=script)
            except asyncio.TimeoutError:
                logger.warning("deno timed out after %ss", settings.timeout)
                return ExecutionResult('error', value="TIMEOUT", returncode=-1,
                                       error_message=f"timed out after {settings.timeout}s",
                                       script=script)
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

        logger.debug("deno exited with status %s", returncode)
        if returncode != 0:
            logger.warning("deno exited with status %s", returncode)
            text = out + err
            return ExecutionResult(
                'error', value=text, output=out, stderr=err, returncode=returncode,
                error_message=err.strip() or f"deno exited with status {returncode}",
                script=script,
            )

        if RAW_RESULT_PARAMS.intersection(p.result_params):
            value = out
        else:
            value = deserialize(out)
        return ExecutionResult('success', value=value, output=out, stderr=err,
                               returncode=returncode, script=script)


__all__ = ["ScriptRunner", "ExecutionResult", "no_color_env", "RAW_RESULT_PARAMS"]

"""Bridge to the Handlebars precompiler running under Node.js."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Protocol

from ..core.settings import Settings

logger = logging.getLogger(__name__)

_BRIDGE_SCRIPT = """
const Handlebars = require(process.argv[1]);
let input = '';
process.stdin.setEncoding('utf8');
process.stdin.on('data', (chunk) => { input += chunk; });
process.stdin.on('end', () => {
  const request = JSON.parse(input);
  let reply;
  try {
    const result = request.op === 'parse'
      ? Handlebars.parse(request.source)
      : Handlebars.precompile(request.ast, request.options || {});
    reply = {ok: true, result: result};
  } catch (e) {
    reply = {ok: false, error: String((e && e.message) || e)};
  }
  process.stdout.write(JSON.stringify(reply));
});
"""


class CompilerUnavailableError(RuntimeError):
    """Raised when the Node.js bridge cannot be started or crashes."""


class TemplateSyntaxError(ValueError):
    """Raised when Handlebars rejects a template."""


class TemplateCompiler(Protocol):
    """Parse and precompile template source text."""

    def parse(self, source: str) -> Any: ...

    def precompile(self, ast: Any, options: dict[str, Any]) -> str: ...


class NodeHandlebarsCompiler:
    """TemplateCompiler backed by the ``handlebars`` npm package.

    Each call spawns ``node`` with a small bridge script and exchanges one
    JSON request and reply over stdin/stdout. The AST returned by
    :meth:`parse` is the JSON form of the Handlebars ``Program`` node, so
    AST transforms operate on plain dicts.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def parse(self, source: str) -> Any:
        return self._call({"op": "parse", "source": source})

    def precompile(self, ast: Any, options: dict[str, Any]) -> str:
        result = self._call({"op": "precompile", "ast": ast, "options": options})
        if not isinstance(result, str):
            raise TemplateSyntaxError("Handlebars precompile returned no code")
        return result

    def _call(self, request: dict[str, Any]) -> Any:
        cmd = [
            self.settings.node_binary,
            "-e",
            _BRIDGE_SCRIPT,
            self.settings.handlebars_module,
        ]
        logger.debug(f"Running Handlebars bridge: {request['op']}")
        try:
            completed = subprocess.run(
                cmd,
                input=json.dumps(request),
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.settings.compiler_timeout,
            )
        except FileNotFoundError as e:
            raise CompilerUnavailableError(
                f"Node.js binary not found: {self.settings.node_binary}"
            ) from e

        if completed.returncode != 0:
            raise CompilerUnavailableError(
                f"Handlebars bridge exited with {completed.returncode}: "
                f"{completed.stderr.strip()}"
            )

        try:
            reply = json.loads(completed.stdout)
        except json.JSONDecodeError as e:
            raise CompilerUnavailableError(
                f"Invalid reply from Handlebars bridge: {completed.stdout!r}"
            ) from e

        if not reply.get("ok"):
            raise TemplateSyntaxError(reply.get("error", "unknown Handlebars error"))
        return reply.get("result")

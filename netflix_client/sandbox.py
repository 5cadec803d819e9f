from __future__ import annotations

import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup
from py_mini_racer import JSEvalException, JSTimeoutException, MiniRacer

from netflix_client.pages import PageStructureError


logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_JAVASCRIPT_TYPES = {
    "",
    "text/javascript",
    "application/javascript",
    "application/ecmascript",
    "text/ecmascript",
}

_TIMER_NAMES = ("setTimeout", "clearTimeout", "setInterval", "clearInterval")

# The engine defines the timers as non-configurable, so they cannot be deleted.
_REMOVE_TIMERS = "".join(f"globalThis.{name} = undefined;\n" for name in _TIMER_NAMES)

_REMAINING_TIMERS = """
JSON.stringify(%s.filter(function (name) {
  return typeof globalThis[name] !== "undefined";
}))
""" % json.dumps(list(_TIMER_NAMES))

_READ_MODELS = """
(function () {
  var ctx = %(namespace)s.reactContext;
  if (!ctx || typeof ctx.models !== "object" || ctx.models === null) {
    return null;
  }
  return JSON.stringify(ctx.models);
})()
"""


class ScriptEvaluationError(PageStructureError):
    pass


class SandboxSetupError(RuntimeError):
    """The engine exposes a capability the sandbox is meant to withhold."""


def inline_scripts(html: str) -> list[str]:
    """Inline JavaScript bodies in document order; ``src`` scripts are skipped."""
    soup = BeautifulSoup(html, "lxml")
    scripts: list[str] = []
    for element in soup.find_all("script"):
        if element.has_attr("src"):
            continue
        script_type = str(element.get("type", "")).split(";")[0].strip().lower()
        if script_type not in _JAVASCRIPT_TYPES:
            continue
        scripts.append(element.string or element.get_text())
    return scripts


def evaluate_page_context(
    html: str,
    namespace: str = "netflix",
    timeout_seconds: float | None = None,
) -> dict[str, Any]:
    """Run the page's inline scripts and return ``<namespace>.reactContext.models``."""
    if not _IDENTIFIER.match(namespace):
        raise ValueError(f"Invalid namespace name: {namespace!r}")

    scripts = inline_scripts(html)
    logger.debug("Evaluating %d inline scripts", len(scripts))

    with MiniRacer() as ctx:
        _run(ctx, _REMOVE_TIMERS, timeout_seconds)
        remaining = json.loads(_run(ctx, _REMAINING_TIMERS, timeout_seconds))
        if remaining:
            raise SandboxSetupError("Timers still reachable in sandbox: " + ", ".join(remaining))
        _run(ctx, f"var window = {{}}; var {namespace} = {{}};", timeout_seconds)

        for index, script in enumerate(scripts):
            try:
                _run(ctx, script, timeout_seconds)
            except ScriptEvaluationError as exc:
                raise ScriptEvaluationError(f"Inline script #{index} failed: {exc}") from exc

        serialized = _run(ctx, _READ_MODELS % {"namespace": namespace}, timeout_seconds)

    if not isinstance(serialized, str):
        raise PageStructureError(f"Page did not define {namespace}.reactContext.models")

    models = json.loads(serialized)
    if not isinstance(models, dict):
        raise PageStructureError(f"{namespace}.reactContext.models is not an object")
    return models


def _run(ctx: MiniRacer, code: str, timeout_seconds: float | None) -> Any:
    try:
        if timeout_seconds is None:
            return ctx.eval(code)
        return ctx.eval(code, timeout_sec=timeout_seconds)
    except (JSEvalException, JSTimeoutException) as exc:
        raise ScriptEvaluationError(str(exc)) from exc

# core/renderer.py
import logging
import re
from functools import lru_cache
from typing import Any, Mapping
from jinja2 import StrictUndefined, Template, TemplateError
from jinja2.sandbox import SandboxedEnvironment
from util.errors import RenderError

logger = logging.getLogger(__name__)

_TAG = re.compile(r"{{.*?}}|{%.*?%}", re.S)
# ".name" at the start of a reference, not "a.name", "x().name" or "1.5"
_DOT_REF = re.compile(r"(?<![\w)\]}'\"])\.(?=[A-Za-z_])")


def undot(source: str) -> str:
    """
    Rewrite root references written with a leading dot ("{{ .name }}",
    "{% if .user.admin %}") to plain Jinja names. Text outside tags is untouched.
    """
    return _TAG.sub(lambda m: _DOT_REF.sub("", m.group(0)), source)


class TemplateRenderer:
    """
    Jinja2 renderer for stored request bodies.

    Unknown variables fail (StrictUndefined) instead of rendering empty, and
    templates run sandboxed since they come from the management API.
    """

    def __init__(self, cache_size: int = 256) -> None:
        self._env = SandboxedEnvironment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._compile = lru_cache(maxsize=cache_size)(self._compile_uncached)

    def _compile_uncached(self, source: str) -> Template:
        return self._env.from_string(undot(source))

    def render(self, values: Mapping[str, Any], source: str) -> bytes:
        try:
            return self._compile(source).render(values).encode("utf-8")
        except TemplateError as e:
            logger.warning("render.error err=%s", type(e).__name__)
            raise RenderError(f"template error: {e}") from e
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.warning("render.error err=%s", type(e).__name__)
            raise RenderError(f"template error: {e}") from e

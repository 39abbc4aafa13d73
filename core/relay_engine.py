# core/relay_engine.py
import logging
from typing import Any, AsyncIterator, Dict, List, Optional
import httpx
from pydantic import ValidationError
import yaml
from core.entities import RelayContext, RelayRequest
from model.relay import AuthenticationDef, BindDef
from util.enums import EntryType, ErrorMessage
from util.errors import AppError, BadConfigError, BadRequestError, RenderError
from util.functions import compose_target, load_mapping
from util.timing import timed

logger = logging.getLogger(__name__)


def parse_payload(raw: bytes) -> Dict[str, Any]:
    try:
        values = load_mapping(raw)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise BadRequestError(f"payload is not valid YAML/JSON: {e}") from e
    if values is None:
        raise BadRequestError("payload must be a mapping of template values")
    return values


def parse_bind(raw: bytes) -> BindDef:
    try:
        return BindDef.model_validate(load_mapping(raw))
    except (yaml.YAMLError, UnicodeDecodeError, ValidationError) as e:
        raise BadConfigError(f"stored bind is malformed: {e}") from e


def parse_auth(raw: bytes) -> AuthenticationDef:
    try:
        return AuthenticationDef.model_validate(load_mapping(raw))
    except (yaml.YAMLError, UnicodeDecodeError, ValidationError) as e:
        raise BadConfigError(f"stored authentication is malformed: {e}") from e


def parse_headers(auth: AuthenticationDef) -> Dict[str, str]:
    try:
        headers = load_mapping(auth.headers)
    except yaml.YAMLError as e:
        raise BadConfigError(f"authentication headers are malformed: {e}") from e
    if headers is None:
        raise BadConfigError("authentication headers must be a mapping")
    empty = [str(k) for k, v in headers.items() if v is None]
    if empty:
        raise BadConfigError(f"authentication headers have no value: {empty}")
    result = {str(k): str(v) for k, v in headers.items()}
    try:
        # httpx only accepts ASCII names and values; check before dispatch.
        httpx.Headers(result)
    except (UnicodeEncodeError, TypeError, ValueError) as e:
        raise BadConfigError(f"authentication headers are malformed: {e}") from e
    return result


async def iter_relay(ctx: RelayContext, req: RelayRequest) -> AsyncIterator[bytes]:
    """
    Resolve `req.key` and yield each destination's raw response, in order.

    Fan-out per bind is templates x authentications, walked sequentially:
      - no bind / template / auth match  -> that branch issues no call
      - render failure                   -> RenderError, nothing further is sent
      - transport failure                -> UpstreamError, remaining calls skipped
    """
    if not req.key:
        info = ErrorMessage.BIND_KEY_REQUIRED.value
        raise AppError(info.message, info.http_status)

    values = parse_payload(req.payload)

    binds = await ctx.store.get(EntryType.BINDS, req.key)
    if not binds:
        logger.info("relay.binds.none key=%s", req.key)
        return

    sent = 0
    for raw_bind in binds:
        bind = parse_bind(raw_bind)
        templates = await ctx.store.get(EntryType.TEMPLATES, bind.template)
        raw_auths = await ctx.store.get(EntryType.AUTHS, bind.authentication)
        logger.debug(
            "relay.bind key=%s template=%s templates=%d auth=%s auths=%d",
            req.key,
            bind.template,
            len(templates),
            bind.authentication,
            len(raw_auths),
        )

        # Parsed on first use; a bind without templates never parses its auths.
        auths: Optional[List[AuthenticationDef]] = None
        for source in templates:
            try:
                text = source.decode("utf-8")
            except UnicodeDecodeError as e:
                raise RenderError(f"template {bind.template!r} is not UTF-8") from e
            with timed(logger, "relay.render", template=bind.template):
                body = ctx.renderer.render(values, text)

            if auths is None:
                auths = [parse_auth(a) for a in raw_auths]
            for auth in auths:
                headers = parse_headers(auth)
                target = compose_target(auth.url, req.suffix, req.query)
                yield await ctx.client.send(target, auth.method, headers, body)
                sent += 1

    logger.info("relay.done key=%s binds=%d calls=%d", req.key, len(binds), sent)

# main.py
import logging
from fastapi_limiter import FastAPILimiter
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from config.cache import close_redis, get_redis, redis_ready
from core.registry import build_registry
from fastapi.responses import JSONResponse
from util.logger import init_logger

logger = logging.getLogger(__name__)


async def _real_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    try:
        redis = await get_redis()
    except Exception as e:
        logger.error("startup.redis.error err=%s", e)
        raise
    if settings.RATE_LIMIT_ENABLED:
        await FastAPILimiter.init(redis, identifier=_real_ip)

    fastApi.state.redis = redis
    fastApi.state.registry = build_registry(settings.tenant_names, redis)
    logger.info("startup.tenants names=%s", ",".join(fastApi.state.registry.names()))
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        try:
            await fastApi.state.registry.aclose()
        except Exception as e:
            logger.error("shutdown.registry.error err=%s", e)
        try:
            await close_redis()
        except Exception as e:
            logger.error("shutdown.redis.error err=%s", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(
    title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Tenant-Id"],
)


@app.get("/healthz")
async def healthz():
    return {"ok": True, "redis": await redis_ready()}


@app.exception_handler(StarletteHTTPException)
async def error_envelope_handler(request: Request, exc: StarletteHTTPException):
    # Every failure, typed AppError or not, leaves as {"error": "<message>"}.
    if exc.status_code >= 500:
        logger.error(
            "request.failed path=%s status=%d err=%s",
            request.url.path,
            exc.status_code,
            exc.detail,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_envelope_handler(request: Request, exc: RequestValidationError):
    # "query.limit: Input should be greater than or equal to 1; ..."
    parts = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"error": "; ".join(parts) or "invalid request"},
    )


@app.exception_handler(429)
async def ratelimit_handler(request: Request, exc):
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests. Try again later."},
        headers={"Retry-After": str(settings.RATE_LIMIT_SECONDS)},
    )


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)

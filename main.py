import uvicorn

# 1) Load env and init traceroot BEFORE importing modules that get a logger
from utils import traceroot_wrapper as traceroot
from app import api

# Only initialize traceroot if enabled
if traceroot.is_enabled():
    from traceroot.integrations.fastapi import connect_fastapi
    connect_fastapi(api)

# 2) Now safe to import modules that use traceroot.get_logger() at import-time
from app.component.environment import env, env_int
from app.router import register_routers

app_logger = traceroot.get_logger("main")

environment = env("NODE_ENV") or env("ENVIRONMENT", "development")
app_logger.info("Starting Walrus Container API")
app_logger.info(f"Environment: {environment}")

prefix = env("url_prefix", "")
app_logger.info(f"Loading routers with prefix: '{prefix}'")
register_routers(api, prefix)
app_logger.info("All routers loaded successfully")


def run() -> None:
    host = env("HOST", "0.0.0.0")
    port = env_int("PORT", 3000)
    app_logger.info(f"Walrus Container API server running on port {port}")
    app_logger.info(f"IPINFO_TOKEN configured: {bool(env('IPINFO_TOKEN'))}")
    uvicorn.run(api, host=host, port=port)


if __name__ == "__main__":
    run()

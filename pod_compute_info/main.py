import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from pod_compute_info.api.compute_info import router as compute_info_router
from pod_compute_info.config import get_server_config
from pod_compute_info.services import k8s_client

load_dotenv()


class HealthCheckFilter(logging.Filter):
    """Drops uvicorn access log lines for health probes."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "GET /health" not in record.getMessage()


logging.basicConfig(
    level=get_server_config()["log_level"],
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A failed bootstrap is retried on the first request
    if k8s_client.initialize_kubernetes_client() is None:
        logger.warning("Starting without a Kubernetes client; requests will return 503 until one can be created.")
    yield


app = FastAPI(lifespan=lifespan)

app.include_router(compute_info_router, prefix="/api")


@app.get("/health")
def read_health():
    """
    Checks the health of the application.

    The status is "degraded" while no Kubernetes client is available.
    """
    if k8s_client.core_v1_api is not None:
        kubernetes_status = {"status": "healthy"}
        status = "ok"
    else:
        kubernetes_status = {
            "status": "not_initialized",
            "message": "Kubernetes client not initialized",
        }
        status = "degraded"

    return {"status": status, "components": {"kubernetes": kubernetes_status}}


def run():
    """Serve the application with uvicorn."""
    server_config = get_server_config()
    logger.info(f"Listening on {server_config['host']}:{server_config['port']}")
    uvicorn.run(
        app,
        host=server_config["host"],
        port=server_config["port"],
        log_level=server_config["log_level"].lower(),
    )


if __name__ == "__main__":
    run()

import logging

from config.logging_config import setup_logging

# Set up logging at the start of the module
setup_logging()
logger = logging.getLogger(__name__)
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.responses import ORJSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from config.config import Config
from contracts.endpoint_address import EndpointAddress
from contracts.overhead_estimate import OverheadEstimate
from contracts.probe_response import ProbeResponse
from contracts.transfer_stats import MeasureRequest, TransferStats
from core.echo_endpoint import EchoEndpoint
from core.errors import TransferTimeoutError
from core.overhead_estimator import OverheadEstimator, get_profile
from core.transfer_probe import TransferProbe

echo_endpoint = EchoEndpoint(
    EndpointAddress(host=Config.ECHO_HOST, port=Config.ECHO_PORT)
)
transfer_probe = TransferProbe()


@asynccontextmanager
async def lifespan(app):
    await echo_endpoint.start()
    yield
    await echo_endpoint.stop()


app = FastAPI(lifespan=lifespan, default_response_class=ORJSONResponse)


@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/probe", response_model=ProbeResponse)
async def health_probe():
    if not echo_endpoint.is_running:
        return ProbeResponse(
            status="stopped",
            address=str(echo_endpoint.address),
            connections_served=echo_endpoint.connections_served,
        )
    return ProbeResponse(
        status="ok",
        address=str(echo_endpoint.bound_address),
        connections_served=echo_endpoint.connections_served,
    )


@app.post("/measure", response_model=TransferStats)
async def measure(data: MeasureRequest):
    if not echo_endpoint.is_running:
        raise HTTPException(status_code=503, detail="Echo endpoint is not running.")
    target = echo_endpoint.bound_address
    logger.info(f"Measuring {data.payload_size} byte transfer to {target}")
    try:
        return await transfer_probe.measure(target, data.payload_size)
    except TransferTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except OSError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/estimate/{nominal_payload_bytes}", response_model=OverheadEstimate)
async def estimate(nominal_payload_bytes: int, profile: Optional[str] = None):
    if nominal_payload_bytes < 0:
        raise HTTPException(status_code=422, detail="nominal_payload_bytes must be >= 0")
    try:
        overhead_profile = get_profile(profile or Config.OVERHEAD_PROFILE)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OverheadEstimator(overhead_profile).estimate(nominal_payload_bytes)


logger.info("Echo control app module loaded and logging is configured.")

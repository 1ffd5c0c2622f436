from pydantic import BaseModel, ConfigDict, Field


class OverheadProfile(BaseModel):
    """
    Named expansion constants describing how an MPC-style protocol inflates
    a plain request/response exchange.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    request_expansion_factor: float = Field(ge=0.0)
    response_expansion_factor: float = Field(ge=0.0)
    fixed_request_bytes: int = Field(default=0, ge=0)
    # Size of the plain response relative to the request, the download baseline.
    assumed_response_factor: float = Field(default=1.0, ge=0.0)


class OverheadEstimate(BaseModel):
    """
    Simulated MPC request/response sizes for one nominal payload size.
    """

    model_config = ConfigDict(frozen=True)

    profile: str
    nominal_payload_bytes: int = Field(ge=0)
    plain_response_bytes: int = Field(ge=0)
    simulated_request_bytes: int = Field(ge=0)
    simulated_response_bytes: int = Field(ge=0)
    upload_overhead_bytes: int = Field(ge=0)
    download_overhead_bytes: int = Field(ge=0)
    upload_ratio: float
    download_ratio: float

from pydantic import BaseModel, ConfigDict, Field


class EndpointAddress(BaseModel):
    """
    Host/port pair identifying an echo endpoint.

    Port 0 asks the OS for an ephemeral port when binding.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(ge=0, le=65535)

    def __str__(self):
        return f"{self.host}:{self.port}"

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, computed_field


class TransferStats(BaseModel):
    """
    Byte counts and timing of a single completed probe.

    Rates and ratio are derived from the counts and the elapsed time and
    cannot be set directly.
    """

    model_config = ConfigDict(frozen=True)

    bytes_sent: int = Field(ge=0)
    bytes_received: int = Field(ge=0)
    elapsed_seconds: float = Field(ge=0.0)

    @property
    def elapsed(self) -> timedelta:
        return timedelta(seconds=self.elapsed_seconds)

    @computed_field
    @property
    def upload_rate(self) -> float:
        """Bytes per second sent; 0.0 when no time elapsed."""
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.bytes_sent / self.elapsed_seconds

    @computed_field
    @property
    def download_rate(self) -> float:
        """Bytes per second received; 0.0 when no time elapsed."""
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.bytes_received / self.elapsed_seconds

    @computed_field
    @property
    def ratio(self) -> float:
        """Received bytes over sent bytes; 0.0 when nothing was sent."""
        if self.bytes_sent == 0:
            return 0.0
        return self.bytes_received / self.bytes_sent


class MeasureRequest(BaseModel):
    """
    Body of an on-demand measurement request.
    """

    payload_size: int = Field(ge=0)

from typing import Optional

from pydantic import BaseModel, ConfigDict

from contracts.transfer_stats import TransferStats


class ProbeOutcome(BaseModel):
    """
    Result of one driver probe: either stats or the error that stopped it.
    """

    model_config = ConfigDict(frozen=True)

    payload_size: int
    stats: Optional[TransferStats] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.stats is not None

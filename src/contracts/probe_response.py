from pydantic import BaseModel


class ProbeResponse(BaseModel):
    """
    Data model representing the health probe response of the hosted echo endpoint.
    """

    status: str
    address: str
    connections_served: int

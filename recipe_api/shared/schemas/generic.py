from pydantic import BaseModel


class StatusResponse(BaseModel):
    """
    A generic response for operations without a meaningful body
    """

    status: str


class CreatedResponse(BaseModel):
    """
    Response of a create operation, carries the assigned id
    """

    id: str

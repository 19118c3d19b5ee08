"""Access-list request and response models."""
from typing import List, Optional

from pydantic import Field

from .common import AccessListItem, TransactionCall, WireModel


class AccessListRequest(WireModel):
    """Body of ``POST /simulate/access-list``."""
    params: TransactionCall
    block: Optional[str] = None


class AccessListResponse(WireModel):
    """Generated access list and the gas used while generating it."""
    access_list: List[AccessListItem] = Field(default_factory=list)
    gas_used: str = "0x0"
    error: Optional[str] = None

from .partner import Partner
from .request import ServiceRequest

__all__ = [
    "Partner",
    "ServiceRequest",
]

from typing import List, Optional

from pydantic import BaseModel


class MetricRequest(BaseModel):
    price_text: str
    size_text: str


class MetricResponse(BaseModel):
    price: float
    size_gb: float
    size_basis: str
    metric: Optional[float] = None
    formatted: Optional[str] = None


class AugmentRequest(BaseModel):
    html: str
    sort: bool = False


class PackageRow(BaseModel):
    index: int
    price_text: Optional[str] = None
    size_text: Optional[str] = None
    price: float
    size_gb: float
    size_basis: str
    metric: Optional[float] = None
    formatted: Optional[str] = None
    skipped_reason: Optional[str] = None


class AugmentResponse(BaseModel):
    html: str
    augmented: int
    packages: List[PackageRow]

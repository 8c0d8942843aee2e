from dataclasses import asdict, dataclass
from typing import Optional

from engine import SizeReading


@dataclass
class PackageResult:
    index: int
    price_text: Optional[str]
    size_text: Optional[str]
    price: float
    size_gb: float
    size_basis: str
    metric: Optional[float]
    formatted: Optional[str]
    skipped_reason: Optional[str] = None

    @property
    def size_reading(self) -> SizeReading:
        return SizeReading(self.size_gb, self.size_basis)

    def to_dict(self) -> dict:
        return asdict(self)

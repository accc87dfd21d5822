from .operator import ChargingPointOperatorRepository
from .station import ChargingStationRepository

__all__ = [
    "ChargingPointOperatorRepository",
    "ChargingStationRepository",
]

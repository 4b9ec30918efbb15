from .aggregation_service import AggregationService
from .work_session_service import WorkSessionService
from .csv_service import CsvService

__all__ = [
    "AggregationService",
    "WorkSessionService",
    "CsvService"
]

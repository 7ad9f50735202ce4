# Services module
from qc_inspection.services.report_service import ReportService
from qc_inspection.services.part_service import PartService
from qc_inspection.services.user_service import UserService

__all__ = [
    "ReportService",
    "PartService",
    "UserService",
]

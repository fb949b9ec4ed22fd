from .data_models import (
    GroupReport,
    RunReport,
    ScalarDelta,
    SectionReport,
    TableComparison,
)
from .table_checker import SECTION_NAMES, TableChecker
from .renderer import RenderOptions, ReportRenderer

__all__ = [
    "TableComparison",
    "ScalarDelta",
    "GroupReport",
    "SectionReport",
    "RunReport",
    "SECTION_NAMES",
    "TableChecker",
    "RenderOptions",
    "ReportRenderer",
]

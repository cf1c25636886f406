from .analysis_service import AnalysisService, FindingsProvider
from .decompilation_service import DecompilationService, ToolPaths
from .report_service import ReportService
from .source_tree import SourceTreeMirror

__all__ = [
    "AnalysisService",
    "FindingsProvider",
    "DecompilationService",
    "ToolPaths",
    "ReportService",
    "SourceTreeMirror",
]

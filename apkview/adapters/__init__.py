from .archive import ZipEntryExtractor
from .tool_runner import ToolOutput, ToolRunner

__all__ = [
    "ZipEntryExtractor",
    "ToolOutput",
    "ToolRunner",
]

from .format_detector import UnknownFormatError, detect_format, require_format
from .reader import UnreadableFileError, read_workbook, read_workbook_file

__all__ = [
    "UnknownFormatError",
    "UnreadableFileError",
    "detect_format",
    "read_workbook",
    "read_workbook_file",
    "require_format",
]

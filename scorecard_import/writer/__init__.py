from .template import TemplateData, build_template_workbook, default_template_data

__all__ = [
    "TemplateData",
    "build_template_workbook",
    "default_template_data",
]

"""
Clone-and-brand pipeline for customer projects.
"""

from .branding import ALLOWED_LOGO_EXTENSIONS, install_branding, validate_logo_filename
from .cloner import EXCLUDED_DIRECTORIES, CloneStats, clone_tree
from .customer_config import write_customer_config
from .installer import InstallHandle, trigger_install
from .pipeline import BrandingResult, PipelineStage, ScaffoldReport, apply_branding, run_scaffold
from .planner import plan_destination, project_directory_name

__all__ = [
    "ALLOWED_LOGO_EXTENSIONS",
    "EXCLUDED_DIRECTORIES",
    "BrandingResult",
    "CloneStats",
    "InstallHandle",
    "PipelineStage",
    "ScaffoldReport",
    "apply_branding",
    "clone_tree",
    "install_branding",
    "plan_destination",
    "project_directory_name",
    "run_scaffold",
    "trigger_install",
    "validate_logo_filename",
    "write_customer_config",
]

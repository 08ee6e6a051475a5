"""Mockup generation orchestrator.

Provides the MockupGenerator class that integrates PromptBuilder, the
provider transport, and validation to produce UI project documents from
natural language.
"""

from .assets import split_data_uri, to_reference_parts
from .lib import ArtifactRequest, MockupGenerator, ProjectContext

__all__ = [
    "MockupGenerator",
    "ArtifactRequest",
    "ProjectContext",
    "split_data_uri",
    "to_reference_parts",
]

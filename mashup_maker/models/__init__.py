from .api import APIDescriptor, AuthType, SelectionCriteria
from .idea import AppIdea
from .project import FileNode, CodeBundle, GeneratedProject
from .layout import (
    Screen, ComponentSuggestion, FlowStep, InteractionFlow, UILayout, CodePreview,
)
from .run import (
    ErrorKind, GenerationRun, PipelineSuccess, PipelineFailure, PipelineOutcome,
)

__all__ = [
    "APIDescriptor", "AuthType", "SelectionCriteria",
    "AppIdea",
    "FileNode", "CodeBundle", "GeneratedProject",
    "Screen", "ComponentSuggestion", "FlowStep", "InteractionFlow", "UILayout", "CodePreview",
    "ErrorKind", "GenerationRun", "PipelineSuccess", "PipelineFailure", "PipelineOutcome",
]

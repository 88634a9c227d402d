"""High level services that orchestrate the application workflow."""

from .controller import AnnotationController
from .pipeline import PipelineDependencies, ProcessingPipeline

__all__ = ["AnnotationController", "PipelineDependencies", "ProcessingPipeline"]

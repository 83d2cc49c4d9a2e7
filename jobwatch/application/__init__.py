"""
Application services.

Orchestrate job start requests together with progress tracking.
"""

from jobwatch.application.import_coordinator import ImportCoordinator
from jobwatch.application.quest_generation import GenerationState, QuestGenerationService

__all__ = ["GenerationState", "ImportCoordinator", "QuestGenerationService"]

"""Image generation services."""

from .blob_storage import LocalBlobStorage
from .generation_service import (
    BatchGenerationError,
    BatchResult,
    Capacity,
    CapacityReachedError,
    GenerationError,
    GenerationService,
)
from .image_client import FalImageClient, NoImageInResponseError
from .prompt_generator import generate_prompt, generate_prompts

__all__ = [
    "BatchGenerationError",
    "BatchResult",
    "Capacity",
    "CapacityReachedError",
    "FalImageClient",
    "GenerationError",
    "GenerationService",
    "LocalBlobStorage",
    "NoImageInResponseError",
    "generate_prompt",
    "generate_prompts",
]

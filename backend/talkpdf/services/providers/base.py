"""
Base AI Provider Interface.

All text-understanding providers must inherit from this base class and
implement all abstract methods. Implementations are synchronous (SDK
clients); AIService runs them in an executor.
"""
from abc import ABC, abstractmethod


class AIProvider(ABC):
    """
    Abstract base class for AI providers.

    Pipeline stages only need two primitives: chat-style text generation
    and reading an attached document.
    """

    name: str = "base"

    @abstractmethod
    def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """
        Run a single system + user exchange.

        Args:
            system_prompt: Instructions for the model
            user_content: Text the instructions apply to
            max_tokens: Output token budget
            temperature: Sampling temperature

        Returns:
            Model output text
        """
        pass

    @abstractmethod
    def read_document(
        self,
        system_prompt: str,
        instruction: str,
        file_bytes: bytes,
        file_name: str,
        mime_type: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """
        Send a document to a multimodal model and return its text output.

        Args:
            system_prompt: Extraction rules
            instruction: Short user instruction sent alongside the file
            file_bytes: Raw document bytes
            file_name: Declared file name
            mime_type: MIME type of file_bytes
            max_tokens: Output token budget
            temperature: Sampling temperature

        Returns:
            Model output text
        """
        pass

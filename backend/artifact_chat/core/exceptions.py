"""Exception types raised by the chat service."""


class ArtifactChatError(Exception):
    """Base class for service errors."""
    pass


class ConfigurationError(ArtifactChatError):
    """Azure OpenAI credentials are missing or unusable."""
    pass


class ToolIterationLimitError(ArtifactChatError):
    """The model kept requesting tools past the configured iteration cap."""

    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations
        super().__init__(f"Maximum tool iterations exceeded ({max_iterations})")


class InvalidBlobKeyError(ArtifactChatError, ValueError):
    """A blob key would resolve outside of its storage directory."""
    pass

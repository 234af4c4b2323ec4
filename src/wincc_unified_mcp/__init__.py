"""WinCC Unified tool server package."""

from .config import BackendConfig, ServerConfig

__version__ = "1.0.0"

__all__ = ["BackendConfig", "ServerConfig", "__version__"]

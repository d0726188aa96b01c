"""Generate exact TypeScript types from YAML and dotenv configuration files."""

__version__ = "0.3.0"

__all__ = ["__version__"]

"""TypeScript output for merged dotenv variables."""

from .declarations import render_process_env
from .zod import render_zod_module

__all__ = ["render_process_env", "render_zod_module"]

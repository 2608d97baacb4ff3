"""reactforge -- idempotent React + TypeScript + Vite project scaffolder."""

__version__ = "0.1.0"

"""Entry point for ``python -m docker_mcp``."""

from .cli import main

if __name__ == "__main__":
    main()

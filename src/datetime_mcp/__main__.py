"""Allow ``python -m datetime_mcp`` as an alias for the ``datetime-mcp`` script."""

from datetime_mcp.cli import main

if __name__ == "__main__":
    main()

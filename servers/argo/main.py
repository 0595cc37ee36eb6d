"""Entry point for the Argo Workflows MCP Server."""

import sys
from pathlib import Path

# Add the source root to the Python path
source_root = Path(__file__).parent.parent.parent / "src"
sys.path.insert(0, str(source_root))

from argomcp.argo_server.server import main

if __name__ == "__main__":
    main()

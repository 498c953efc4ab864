import sys

from ssh_mcp.main import main

if __name__ == "__main__":
    sys.exit(main())

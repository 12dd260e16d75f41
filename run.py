"""Entrypoint: settings (PORT etc.) come from the environment, no shell expansion needed."""
import sys

from hello_app.server import main

if __name__ == "__main__":
    sys.exit(main())

"""Entry point: python -m taskboard"""

from taskboard.server import main

if __name__ == "__main__":
    main()

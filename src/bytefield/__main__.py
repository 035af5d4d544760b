"""Command-line interface."""
from bytefield.main import main

if __name__ == "__main__":
    main()

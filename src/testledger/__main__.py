"""Allow running testledger as a module: python -m testledger."""

from testledger.cli import main

if __name__ == "__main__":
    main()

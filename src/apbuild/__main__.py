"""Allow running apbuild as ``python -m apbuild``."""

from apbuild.cli import main

main()

"""Allow ``python -m craftgen``."""

from craftgen.cli import main

main()

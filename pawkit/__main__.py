"""
Module entry-point that makes the package runnable with

    python -m pawkit

The behaviour is identical to the *pawkit* console script because the Click
group imported below performs all CLI dispatching.
"""

from pawkit.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()

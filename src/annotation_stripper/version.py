"""
Version constants for the annotation stripper.

Component versions are bumped whenever a stage changes its output for some
input, so transformed trees can be traced back to the rules that produced them.
"""

__version__ = "1.0.0"

# Component versions (update these when implementations change)
ESCAPES_VERSION = "escapes-1.0.0"
SCANNER_VERSION = "scanner-1.0.0"
RECOGNIZER_VERSION = "recognizer-1.0.0"
REMOVAL_VERSION = "removal-1.0.0"


def version_string() -> str:
    """Full version line printed by the CLI."""
    components = ", ".join(
        [ESCAPES_VERSION, SCANNER_VERSION, RECOGNIZER_VERSION, REMOVAL_VERSION]
    )
    return f"annotation-stripper {__version__} ({components})"

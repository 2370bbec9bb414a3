"""
wsprqso version information.

The ADIF header written at startup takes its PROGRAMID / PROGRAMVERSION
from here, so keep this in step with pyproject.toml.
"""

PROGRAM_ID = "wsprqso"
PROGRAM_VERSION = "0.3.0"

# ADIF specification version the emitted log claims to follow
ADIF_VERSION = "3.1.1"

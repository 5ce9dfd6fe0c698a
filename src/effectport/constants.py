"""Application-level constants for effectport.

Port names are part of the wire protocol and must match what the core declares.
"""

# ============================================================================
# Application identity
# ============================================================================

APP_NAME = "effectport"

# ============================================================================
# Command kinds
# ============================================================================

READ_FILE = "readFile"
WRITE_FILE = "writeFile"
PRINT = "print"
EXIT_SUCCESS = "exitSuccess"
EXIT_FAILURE = "exitFailure"

# ============================================================================
# Protocol variants and port names
# ============================================================================

VARIANT_SPLIT = "split"
VARIANT_UNIFIED = "unified"
DEFAULT_VARIANT = VARIANT_UNIFIED

# Variant A: per-effect channels
PORT_OS = "os"
PORT_OS_RESULT = "osResult"
PORT_PRINT = "print"
PORT_PRINT_AND_EXIT_FAILURE = "printAndExitFailure"
PORT_PRINT_AND_EXIT_SUCCESS = "printAndExitSuccess"

# Variant B: unified channels
PORT_TO_JS = "toJS"
PORT_FROM_JS = "fromJS"

# ============================================================================
# Process surface
# ============================================================================

EXIT_CODE_SUCCESS = 0
EXIT_CODE_FAILURE = 1

DEFAULT_GIT_EXECUTABLE = "git"
BRANCH_QUERY_ARGS = ("rev-parse", "--abbrev-ref", "HEAD")

FILE_ENCODING = "utf-8"

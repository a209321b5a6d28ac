"""Fixed names and limits shared across rtpath."""

APP_NAME = "rtpath"
ENV_PREFIX = "RTPATH_"

SEP = "/"
DELIM = ":"

# Longest path (in characters, terminator excluded) any working value may hold.
MAXPATHLEN = 4096

# Linux kernel limit since 4.2.
MAX_SYMLINK_HOPS = 40

LANDMARK = "os.py"
BUILD_MARKER = "Modules/Setup.local"
BUILD_LIB_DIR = "Lib"
PYBUILDDIR_MARKER = "pybuilddir.txt"
VENV_CONFIG = "pyvenv.cfg"
VENV_HOME_KEY = "home"
LIB_DYNLOAD = "lib-dynload"
EXEC_PREFIX_FALLBACK_DIR = "lib/lib-dynload"

DEFAULT_HOME_ENV_VAR = "PYTHONHOME"

"""edsctl - install and uninstall EvalEds on a single host."""

__version__ = "0.1.0"

# Managed application identity
APP_NAME = "evaleds"
APP_DISPLAY_NAME = "EvalEds"
REPO_URL = "https://github.com/prequired/evaleds"

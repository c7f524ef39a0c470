import os
import sys


# Put `src/backend` on sys.path so `import common.datafilter`, `adapters`, `api` and `scripts`
# resolve without installing the project (pytest's rootdir may be the repository root).
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import os

import dotenv

dotenv.load_dotenv()

# Class added to every cell built from raw rows (in addition to any
# per-table ``common_class``).
COMMON_CLASS: str = os.getenv("TABLEREF_COMMON_CLASS", "").strip()

# Class given to cells of the Random kind.
RANDOM_CELL_CLASS: str = os.getenv("TABLEREF_RANDOM_CELL_CLASS", "cell-random").strip()

# Longest chain of cell-to-cell references followed while resolving a
# single cell before giving up.
MAX_REFERENCE_DEPTH: int = int(os.getenv("TABLEREF_MAX_REFERENCE_DEPTH", "100"))

# Whether reference errors abort a read (True) or are collected in the
# report (False).
STRICT: bool = os.getenv("TABLEREF_STRICT", "true").lower() in ("1", "true", "yes")

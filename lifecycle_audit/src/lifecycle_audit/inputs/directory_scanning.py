# --- Source discovery --------------------------------------------------------
import logging
import os

from lifecycle_audit.src.lifecycle_audit.indexer import JavaIndexer

logger = logging.getLogger(__name__)


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def index_file(indexer: JavaIndexer, path: str) -> bool:
    """Indexes one .java file; logs and returns False if it cannot be read."""
    try:
        src = read_text(path)
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        return False
    indexer.index_source(src, path)
    return True


def index_directory(indexer: JavaIndexer, root_dir: str) -> int:
    """
    Recursively index all .java files under a directory, in a stable order.
    Returns the number of files indexed.
    """
    count = 0
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames.sort()
        for fn in sorted(filenames):
            if fn.endswith(".java"):
                if index_file(indexer, os.path.join(dirpath, fn)):
                    count += 1
    logger.info("Indexed %d Java files under %s", count, root_dir)
    return count


def index_paths(indexer: JavaIndexer, paths: list[str]) -> int:
    """Indexes a mix of .java files and directories."""
    count = 0
    for path in paths:
        if os.path.isdir(path):
            count += index_directory(indexer, path)
        elif os.path.isfile(path):
            count += int(index_file(indexer, path))
        else:
            logger.warning("No such file or directory: %s", path)
    return count

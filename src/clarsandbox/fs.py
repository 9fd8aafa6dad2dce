import os
import shutil
import stat
import sys


def _rmtree(path: str, top: str, retried: set) -> None:
    def make_writable_and_retry(func, failed, exc):
        if isinstance(exc, tuple):
            exc = exc[1]
        if not os.path.lexists(failed):
            return
        # read-only parents block deletion on POSIX; never touch anything above `top`
        if os.path.abspath(failed) != top:
            os.chmod(os.path.dirname(failed), stat.S_IRWXU)
        if os.path.isdir(failed) and not os.path.islink(failed):
            # unreadable or untraversable directories stop rmtree from descending
            if failed in retried:
                raise exc
            retried.add(failed)
            os.chmod(failed, stat.S_IRWXU)
            _rmtree(failed, top, retried)
            return
        if func in (os.unlink, os.remove):
            if not os.path.islink(failed):
                os.chmod(failed, stat.S_IRWXU)
            func(failed)
            return
        raise exc

    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=make_writable_and_retry)
    else:
        shutil.rmtree(path, onerror=make_writable_and_retry)


def remove_tree(path: str) -> None:
    """Recursively delete `path`; a missing path is not an error."""
    if not os.path.lexists(path):
        return
    _rmtree(path, os.path.abspath(path), set())

# patchforge/commit/core.py
import base64
import binascii
import contextlib
import logging
import os
import shutil
import tempfile

from ..errors.patch import BinaryContentError
from ..errors.request import InvalidRequestError

log = logging.getLogger(__name__)

TEMP_PREFIX = ".pf-"


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once: os.umask() can only be queried by setting it, which is process-wide.
UMASK = _read_umask()


def encode_content(content: str, encoding: str = "utf8") -> bytes:
    """
    Turn a content payload into the bytes that will hit the disk.

    ``base64`` decodes the payload, ``binary`` maps each code point to one
    byte (latin-1), ``utf8`` encodes as UTF-8.
    """
    if encoding == "utf8":
        return content.encode("utf-8")
    if encoding == "base64":
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidRequestError(f"Invalid base64 content: {e}")
    if encoding == "binary":
        try:
            return content.encode("latin-1")
        except UnicodeEncodeError as e:
            raise InvalidRequestError(f"Invalid binary content: code point above 255 at offset {e.start}")
    raise InvalidRequestError(f"Invalid encoding: {encoding}")


def read_text(path: str) -> str:
    """
    Read a file as UTF-8 with newlines untouched.

    Files that are not valid UTF-8 raise BinaryContentError; nothing is
    decoded lossily.
    """
    with open(path, "rb") as f:
        data = f.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BinaryContentError(
            f"Cannot patch file that is not valid UTF-8: {path} "
            f"(byte 0x{data[e.start]:02x} at offset {e.start})",
            suggestions=["Rewrite the whole file with content mode and encoding 'binary' or 'base64'"],
        ) from None


def atomic_write(dest: str, data: bytes) -> bool:
    """
    Replace ``dest`` with ``data`` via a same-directory temp file and os.replace().

    The target is either fully rewritten or left exactly as it was. Parent
    directories are created. Existing files keep their permission bits.
    Returns True when the file was created.
    """
    dirpath = os.path.dirname(dest)
    os.makedirs(dirpath, exist_ok=True)
    created = not os.path.exists(dest)

    fd, tmp = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=".tmp", dir=dirpath)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if created:
            # mkstemp creates 0600; new files get the usual umask-derived mode.
            os.chmod(tmp, 0o666 & ~UMASK)
        else:
            shutil.copymode(dest, tmp)
        os.replace(tmp, dest)
    except BaseException:
        with contextlib.suppress(OSError):
            os.remove(tmp)
        raise
    log.debug(f"wrote {len(data)} bytes to {dest}")
    return created

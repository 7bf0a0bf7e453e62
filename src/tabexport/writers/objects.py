"""Helpers to persist arbitrary Python objects to container files.

Two container modes exist:

- single: one value whose name is not stored (`save_object` / `load_object`);
  the caller binds the restored value to whatever name it likes. Compressed by
  default.
- named: a mapping of name to value (`save_objects` / `load_objects`); the
  restored names can be bound straight back into a namespace such as
  `globals()`.

Containers are pickled envelopes, optionally gzip-compressed. Values are
serialized in memory before the destination is opened, so an unpicklable value
never leaves a file behind.
"""

from __future__ import annotations

import gzip
import pathlib
import pickle
import typing
import zlib

from loguru import logger

from tabexport.config import settings
from tabexport.errors import PathError, SerializationError
from tabexport.models.options import NameMode
from tabexport.utils.validation import ensure_parent_exists

CONTAINER_FORMAT = "tabexport-objects"
CONTAINER_VERSION = 1
GZIP_MAGIC = b"\x1f\x8b"


def _dump(envelope: dict[str, typing.Any], protocol: int | None, compress: bool) -> bytes:
    try:
        data = pickle.dumps(envelope, protocol=protocol if protocol is not None else settings.pickle_protocol)
    except (pickle.PicklingError, TypeError, AttributeError, RecursionError) as exc:
        raise SerializationError(f"Value cannot be serialized: {exc}") from exc
    return gzip.compress(data, mtime=0) if compress else data


def _write_bytes(p: pathlib.Path, data: bytes) -> None:
    try:
        with p.open("wb") as fh:
            fh.write(data)
    except OSError as exc:
        logger.warning(f"Failed to write {p}: {exc}")
        raise PathError(f"Cannot write {p}: {exc}") from exc


def _read_envelope(path: str | pathlib.Path) -> dict[str, typing.Any]:
    p = pathlib.Path(path)
    if not p.is_file():
        raise PathError(f"No such file: {p}")
    with p.open("rb") as fh:
        data = fh.read()
    if data.startswith(GZIP_MAGIC):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise SerializationError(f"Corrupt compressed container {p}: {exc}") from exc
    try:
        envelope = pickle.loads(data)
    except (
        pickle.UnpicklingError,
        EOFError,
        AttributeError,
        ImportError,
        IndexError,
        ValueError,
        TypeError,
        RecursionError,
    ) as exc:
        raise SerializationError(f"{p} is not a readable object container: {exc}") from exc
    if not isinstance(envelope, dict) or envelope.get("format") != CONTAINER_FORMAT:
        raise SerializationError(f"{p} is not a {CONTAINER_FORMAT} container")
    return envelope


def save_object(
    value: typing.Any,
    path: str | pathlib.Path,
    *,
    compress: bool | None = None,
    protocol: int | None = None,
) -> pathlib.Path:
    """Save a single value; its name is not stored.

    Args:
        value (Any): Any picklable value.
        path (str | pathlib.Path): Destination; its parent directory must exist.
        compress (bool | None): gzip the container; `settings.compress_single_objects` when None.
        protocol (int | None): Pickle protocol; `settings.pickle_protocol` when None.

    Returns:
        pathlib.Path: Path object pointing to the file written.

    """
    p = ensure_parent_exists(path)
    compress = settings.compress_single_objects if compress is None else compress
    envelope = {"format": CONTAINER_FORMAT, "version": CONTAINER_VERSION, "mode": NameMode.SINGLE.value, "payload": value}
    try:
        data = _dump(envelope, protocol, compress)
    except SerializationError as exc:
        logger.warning(f"Not writing {p}: {exc}")
        raise
    _write_bytes(p, data)
    logger.info(f"Saved {type(value).__name__} to {p} ({len(data)} bytes)")
    return p


def save_objects(
    objects: typing.Mapping[str, typing.Any],
    path: str | pathlib.Path,
    *,
    compress: bool = False,
    protocol: int | None = None,
) -> pathlib.Path:
    """Save several values together with their names.

    Raises:
        ValueError: When a name is not a valid Python identifier.
        SerializationError: When a value cannot be pickled.

    """
    bad = [name for name in objects if not (isinstance(name, str) and name.isidentifier())]
    if bad:
        raise ValueError(f"Object names must be valid identifiers: {bad}")
    p = ensure_parent_exists(path)
    envelope = {
        "format": CONTAINER_FORMAT,
        "version": CONTAINER_VERSION,
        "mode": NameMode.NAMED.value,
        "payload": dict(objects),
    }
    try:
        data = _dump(envelope, protocol, compress)
    except SerializationError as exc:
        logger.warning(f"Not writing {p}: {exc}")
        raise
    _write_bytes(p, data)
    logger.info(f"Saved {len(objects)} named object(s) {sorted(objects)} to {p}")
    return p


def export_object(
    value: typing.Any,
    path: str | pathlib.Path,
    mode: NameMode | str = NameMode.SINGLE,
    **kwargs: typing.Any,
) -> pathlib.Path:
    """Save `value` in the container mode selected by `mode`.

    In named mode `value` must be a mapping of name to value.
    """
    mode = NameMode(mode)
    if mode is NameMode.NAMED:
        if not isinstance(value, typing.Mapping):
            raise TypeError("Named mode expects a mapping of name to value")
        return save_objects(value, path, **kwargs)
    return save_object(value, path, **kwargs)


def load_object(path: str | pathlib.Path) -> typing.Any:
    """Restore the value stored by `save_object`.

    Raises:
        SerializationError: When the file is not a single-value container.

    """
    envelope = _read_envelope(path)
    if envelope.get("mode") != NameMode.SINGLE.value:
        raise SerializationError(f"{path} holds named objects; use load_objects")
    return envelope["payload"]


def load_objects(
    path: str | pathlib.Path,
    namespace: typing.MutableMapping[str, typing.Any] | None = None,
) -> dict[str, typing.Any]:
    """Restore the named values stored by `save_objects`.

    Args:
        path (str | pathlib.Path): Container file.
        namespace (MutableMapping | None): When given (e.g. `globals()`), the
            restored names are bound into it.

    Returns:
        dict[str, Any]: Mapping of the original names to restored values.

    """
    envelope = _read_envelope(path)
    if envelope.get("mode") != NameMode.NAMED.value:
        raise SerializationError(f"{path} holds a single unnamed object; use load_object")
    objects = dict(envelope["payload"])
    if namespace is not None:
        namespace.update(objects)
        logger.debug(f"Bound {sorted(objects)} into caller namespace")
    return objects

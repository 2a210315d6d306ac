"""Load CustomResourceDefinitions from files and directories (internal).

A source is a single file or a directory that is walked recursively. Files
may hold several YAML documents; JSON files are read by the same YAML
parser. Documents that are empty or describe anything but a
CustomResourceDefinition are skipped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from crdiff._internal.canonical_json import canonical_dumps
from crdiff._internal.logging import get_logger
from crdiff.codes import ErrorCode
from crdiff.errors import DuplicateIdentityError, DuplicateVersionError, LoadError
from crdiff.kernel.crd import CRD, CRD_KIND, parse_crd

_log = get_logger("io.loader")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _CRDYamlLoader(yaml.SafeLoader):
    """SafeLoader that produces JSON-compatible data.

    Timestamps stay plain strings, and non-string mapping keys (``1:``,
    ``true:``, ``null:``) are converted to their JSON spelling, the way
    Kubernetes converts YAML to JSON.
    """

    def construct_mapping(self, node, deep=False):
        mapping = super().construct_mapping(node, deep=deep)
        return {_json_key(key): value for key, value in mapping.items()}


def _json_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    return canonical_dumps(key)


_CRDYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class LoaderOptions(BaseModel):
    """Options for load_crds."""

    # only applied while walking directories; explicit files are always read
    file_extensions: Tuple[str, ...] = ("yaml", "yml", "json")

    model_config = ConfigDict(frozen=True, extra="forbid")


def load_crds(source: Union[str, Path], options: Optional[LoaderOptions] = None) -> Dict[str, CRD]:
    """Load all CRDs from a file or directory, keyed by identifier.

    Raises:
        LoadError: if the source is missing or unreadable, a document is
            malformed or not a valid CRD, or a CRD is defined twice
    """
    options = options or LoaderOptions()
    path = Path(source)

    if not path.exists():
        raise LoadError("invalid source: no such file or directory", code=ErrorCode.SOURCE_NOT_FOUND, source=str(path))

    if path.is_dir():
        _log.debug("reading_directory", directory=str(path))
        files = _list_files(path, options.file_extensions)
    else:
        files = [path]

    result: Dict[str, CRD] = {}
    for file_path in files:
        for crd in _load_file(file_path):
            identifier = crd.identifier()
            if identifier in result:
                raise DuplicateIdentityError(identifier, source=str(file_path))
            result[identifier] = crd

    _log.debug("loaded_crds", source=str(path), count=len(result))
    return {identifier: result[identifier] for identifier in sorted(result)}


def _has_extension(path: Path, extensions: Tuple[str, ...]) -> bool:
    return path.suffix.lstrip(".") in extensions


def _list_files(directory: Path, extensions: Tuple[str, ...]) -> List[Path]:
    return sorted(p for p in directory.rglob("*") if p.is_file() and _has_extension(p, extensions))


def _load_file(path: Path) -> List[CRD]:
    _log.debug("reading_file", filename=str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"failed to read file: {e}", code=ErrorCode.UNREADABLE_SOURCE, source=str(path)) from e

    result: List[CRD] = []
    index = 0
    documents = yaml.load_all(text, Loader=_CRDYamlLoader)

    while True:
        index += 1
        try:
            document = next(documents)
        except StopIteration:
            break
        except yaml.YAMLError as e:
            raise LoadError(
                f"document is not valid YAML: {e}",
                code=ErrorCode.MALFORMED_DOCUMENT,
                source=str(path),
                document=index,
            ) from e

        crd = _parse_document(document, str(path), index)
        if crd is not None:
            result.append(crd)

    return result


def _parse_document(document: Any, source: str, index: int) -> Optional[CRD]:
    if document is None:
        return None

    if not isinstance(document, dict):
        raise LoadError("document is not a mapping", code=ErrorCode.MALFORMED_DOCUMENT, source=source, document=index)

    if document.get("kind") != CRD_KIND:
        _log.debug("skipping_document", filename=source, document=index, kind=document.get("kind"))
        return None

    try:
        crd = parse_crd(document)
    except ValidationError as e:
        raise LoadError(
            f"document is not a valid {document.get('apiVersion')} CustomResourceDefinition: {e}",
            code=ErrorCode.INVALID_CRD,
            source=source,
            document=index,
        ) from e
    except ValueError as e:
        raise LoadError(str(e), code=ErrorCode.UNRECOGNIZED_API_VERSION, source=source, document=index) from e

    try:
        crd.versions()
    except DuplicateVersionError as e:
        raise LoadError(
            f"{crd.identifier()} is invalid: {e}",
            code=ErrorCode.DUPLICATE_VERSION,
            source=source,
            document=index,
        ) from e

    return crd

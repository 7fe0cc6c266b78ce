from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from spaify.log import get_logger

log = get_logger(__name__)

DEFAULT_SEPARATOR = ","
DEFAULT_ENTRY_PREFIX = "\\"


class PatchStatus(str, Enum):
    """Outcome of a region patch."""

    PATCHED = "patched"
    ALREADY_PRESENT = "already_present"
    MARKER_NOT_FOUND = "marker_not_found"
    REGION_MALFORMED = "region_malformed"


@dataclass(frozen=True)
class MarkerPair:
    """Start and end marker delimiting a region of a document."""

    start: str
    end: str


@dataclass(frozen=True)
class PatchResult:
    """
    Result of `patch_region()`.

    Attributes:
    * `status`: What happened (see `PatchStatus`).
    * `document`: The resulting document; the input document unless patched.
    * `reason`: Human readable explanation for statuses other than `patched`.
    """

    status: PatchStatus
    document: str
    reason: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.status == PatchStatus.PATCHED


MarkerPath = Union[MarkerPair, tuple[str, str], Sequence[Union[MarkerPair, tuple[str, str]]]]


def find_region(document: str, start_marker: str, end_marker: str) -> tuple[Optional[str], Optional[PatchStatus]]:
    """
    Locate the text between the first start marker and the first end marker after it.

    :param document: Text to search in.
    :param start_marker: Literal text opening the region.
    :param end_marker: Literal text closing the region.
    :return: Tuple of (region, None) if found, or (None, failure status).
    """
    start = document.find(start_marker)
    if start == -1:
        return None, PatchStatus.MARKER_NOT_FOUND

    start += len(start_marker)
    end = document.find(end_marker, start)
    if end == -1:
        if end_marker in document:
            return None, PatchStatus.REGION_MALFORMED
        return None, PatchStatus.MARKER_NOT_FOUND

    return document[start:end], None


def extract_region(document: str, start_marker: str, end_marker: str) -> tuple[str, bool]:
    """
    Extract the region between two markers.

    :param document: Text to search in.
    :param start_marker: Literal text opening the region.
    :param end_marker: Literal text closing the region.
    :return: Tuple of (region, True), or ("", False) if the region can't be found.
    """
    region, error = find_region(document, start_marker, end_marker)
    if error:
        return "", False
    return region, True


def contains_entry(region: str, entry: str) -> bool:
    return entry in region


def detect_indentation(region: str, entry_prefix: str = DEFAULT_ENTRY_PREFIX) -> str:
    """
    Detect how the first entry in a region is indented.

    The result is the text between the last line break before the first
    `entry_prefix` and the prefix itself, including the line break (`\r\n`
    or `\n`), so that it can be placed verbatim in front of a new entry.

    :param region: Region text.
    :param entry_prefix: Token that every entry starts with.
    :return: Indentation string, or an empty string if there are no entries.
    """
    pos = region.find(entry_prefix)
    if pos == -1:
        return ""

    before = region[:pos]
    line_start = before.rfind("\n")
    if line_start == -1:
        return before
    if line_start > 0 and before[line_start - 1] == "\r":
        line_start -= 1
    return before[line_start:]


def insert_entry(region: str, entry: str, indentation: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """
    Add an entry after the last separator in the region.

    :param region: Region text.
    :param entry: Entry to add.
    :param indentation: Text to put in front of the entry.
    :param separator: Separator terminating each entry.
    :return: Modified region (unchanged if it has no separator).
    """
    pos = region.rfind(separator)
    if pos == -1:
        return region

    pos += len(separator)
    return region[:pos] + indentation + entry + separator + region[pos:]


def splice_region(document: str, original_region: str, new_region: str) -> str:
    """
    Replace the last occurrence of `original_region` in the document.

    :param document: Text containing the original region.
    :param original_region: Region text as extracted from the document.
    :param new_region: Replacement text.
    :return: New document (unchanged if the region doesn't occur in it).
    """
    pos = document.rfind(original_region)
    if pos == -1:
        return document
    return document[:pos] + new_region + document[pos + len(original_region) :]


def _marker_pairs(markers: MarkerPath) -> list[MarkerPair]:
    if isinstance(markers, MarkerPair):
        return [markers]
    if isinstance(markers, tuple) and len(markers) == 2 and all(isinstance(m, str) for m in markers):
        return [MarkerPair(*markers)]
    return [m if isinstance(m, MarkerPair) else MarkerPair(*m) for m in markers]


def patch_region(
    document: str,
    markers: MarkerPath,
    entry: str,
    *,
    separator: str = DEFAULT_SEPARATOR,
    entry_prefix: str = DEFAULT_ENTRY_PREFIX,
) -> PatchResult:
    """
    Add an entry to a region of a document, unless it's already there.

    The region is found by following `markers`, a list of marker pairs
    where each pair is looked up inside the region found by the previous
    one. A single pair may be passed directly. The new entry is placed
    after the last existing entry of the innermost region, indented the
    same way as the first one. Text outside of the region is left intact.

    This never raises on unexpected input; the returned status tells the
    caller whether (and why) the document was left unchanged.

    :param document: Text to patch.
    :param markers: Marker pair, or a path of marker pairs.
    :param entry: Entry to add, without separator.
    :param separator: Separator terminating each entry.
    :param entry_prefix: Token that existing entries start with.
    :return: Patch result with the new document.
    """
    pairs = _marker_pairs(markers)
    if not pairs:
        return PatchResult(PatchStatus.MARKER_NOT_FOUND, document, "No markers given")

    regions = [document]
    for pair in pairs:
        region, error = find_region(regions[-1], pair.start, pair.end)
        if error == PatchStatus.MARKER_NOT_FOUND:
            return PatchResult(error, document, f"Markers {pair.start!r} ... {pair.end!r} not found")
        elif error:
            return PatchResult(error, document, f"Marker {pair.end!r} does not follow {pair.start!r}")
        regions.append(region)

    innermost = regions[-1]
    if contains_entry(innermost, entry):
        return PatchResult(PatchStatus.ALREADY_PRESENT, document)

    if entry_prefix not in innermost or separator not in innermost:
        return PatchResult(PatchStatus.REGION_MALFORMED, document, "No existing entry to insert after")

    indentation = detect_indentation(innermost, entry_prefix)
    replacement = insert_entry(innermost, entry, indentation, separator)

    # Splice back from the innermost region outwards
    for parent_index in range(len(regions) - 2, -1, -1):
        original = regions[parent_index + 1]
        replacement = splice_region(regions[parent_index], original, replacement)

    log.debug(f"Inserted {entry!r} into region {pairs[-1].start!r} ... {pairs[-1].end!r}")
    return PatchResult(PatchStatus.PATCHED, replacement)


__all__ = [
    "MarkerPair",
    "PatchResult",
    "PatchStatus",
    "contains_entry",
    "detect_indentation",
    "extract_region",
    "find_region",
    "insert_entry",
    "patch_region",
    "splice_region",
]

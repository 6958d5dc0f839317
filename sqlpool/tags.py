from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .exceptions import TagValidationError

MAX_TAGS = 50
MAX_TAG_NAME_LENGTH = 512
MAX_TAG_VALUE_LENGTH = 256
INVALID_TAG_NAME_CHARS = frozenset("<>%&\\?/")

RawTags = Union[Mapping[str, Optional[str]], Iterable[Tuple[str, Optional[str]]]]


def _validate_tag(name: str, value: str):
    if not name or not name.strip():
        raise TagValidationError("Tag names must not be empty.")

    if len(name) > MAX_TAG_NAME_LENGTH:
        raise TagValidationError(
            f"Tag name {name[:32]!r}... exceeds {MAX_TAG_NAME_LENGTH} characters."
        )

    invalid_chars = INVALID_TAG_NAME_CHARS.intersection(name)
    if invalid_chars:
        raise TagValidationError(
            f"Tag name {name!r} contains invalid characters: {' '.join(sorted(invalid_chars))}"
        )

    if len(value) > MAX_TAG_VALUE_LENGTH:
        raise TagValidationError(
            f"Value of tag {name!r} exceeds {MAX_TAG_VALUE_LENGTH} characters."
        )


def create_tag_dictionary(
    raw_tags: Optional[RawTags], validate: bool = True
) -> Optional[Dict[str, str]]:
    """Convert tags supplied by the user into a dictionary.

    Missing values are converted to empty strings. If no tags are supplied,
    None is returned so the request leaves tags unspecified.

    With `validate` set, Azure's limits for resource tags are checked: the
    number of tags, lengths of names and values, characters in names and
    that names are unique, ignoring case.
    """
    if raw_tags is None:
        return None

    if isinstance(raw_tags, Mapping):
        raw_tags = raw_tags.items()

    tags = {}
    seen_names = set()

    for name, value in raw_tags:
        name = str(name)
        value = "" if value is None else str(value)

        if validate:
            _validate_tag(name, value)
            folded = name.casefold()
            if folded in seen_names:
                raise TagValidationError(f"Duplicate tag name: {name!r}")
            seen_names.add(folded)

        tags[name] = value

    if not tags:
        return None

    if validate and len(tags) > MAX_TAGS:
        raise TagValidationError(f"Too many tags: {len(tags)} (at most {MAX_TAGS} are allowed).")

    return tags

import re
from typing import Dict, Set

from ..errors import EncodingError

MAX_NAME_LENGTH = 255

# Letters, digits and the punctuation the CPLEX LP grammar allows in names.
_NAME_PATTERN = re.compile(r"^[A-Za-z_!\"#$%&()/,;?@`'{}|~][A-Za-z0-9_!\"#$%&()/,.;?@`'{}|~]*$")
_STEM_STRIP = re.compile(r"[^A-Za-z0-9_]")

# Words an LP reader takes as a section keyword or a bound value.
RESERVED_NAMES = frozenset(
    {
        "minimize", "minimise", "minimum", "min",
        "maximize", "maximise", "maximum", "max",
        "subject", "such", "that", "st", "s.t.", "st.",
        "bounds", "bound",
        "generals", "general", "gen",
        "integers", "integer", "binaries", "binary", "bin",
        "semi-continuous", "semis", "semi", "sos",
        "free", "inf", "infinity",
        "end",
    }
)


def validate_name(name: str) -> str:
    if not name:
        raise EncodingError("Variable name must not be empty.")
    if len(name) > MAX_NAME_LENGTH:
        raise EncodingError(
            f"Variable name '{name[:20]}...' is longer than {MAX_NAME_LENGTH} characters."
        )
    if not _NAME_PATTERN.match(name):
        raise EncodingError(
            f"Variable name '{name}' contains characters the .lp format does not accept."
        )
    if name.lower() in RESERVED_NAMES:
        raise EncodingError(f"Variable name '{name}' is a reserved word of the .lp format.")
    return name


def is_valid_name(name: str) -> bool:
    try:
        validate_name(name)
    except EncodingError:
        return False
    return True


class UniqueNameGenerator:
    """
    Hands out valid, never-repeated variable names.

        gen = UniqueNameGenerator()
        gen.add_variable("x")     # "x"
        gen.add_variable("!#?/")  # "v"
        gen.add_variable("x")     # "x2"
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}
        self._issued: Set[str] = set()

    def add_variable(self, name: str) -> str:
        stem = _stem(name)
        count = self._counts.get(stem, 0)
        while True:
            count += 1
            candidate = stem if count == 1 else f"{stem}{count}"
            if candidate not in self._issued:
                break
        self._counts[stem] = count
        self._issued.add(candidate)
        return candidate


def _stem(name: str) -> str:
    stem = _STEM_STRIP.sub("", name)
    if not stem:
        return "v"
    if stem[0].isdigit() or stem.lower() in RESERVED_NAMES:
        stem = f"v{stem}"
    return stem[:MAX_NAME_LENGTH - 8]

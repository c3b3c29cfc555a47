"""CocoaPods version constraint -> SPM requirement translation.

Follows the CocoaPods / RubyGems operator semantics:

- ``= 1.0.0``             -> exact("1.0.0")
- ``> 1.0.0``, ``>= 1.0`` -> from("1.0.0")
- ``~> 2.1``              -> upToNextMajor("2.1")   (>= 2.1.0, < 3.0.0)
- ``~> 2.1.3``            -> upToNextMinor("2.1.3") (>= 2.1.3, < 2.2.0)
- ``< 2.0``, ``<= 2.0``   -> upToNextMajor("2.0")   (SPM has no upper-bound-only form)
- ``1.0.0``               -> exact("1.0.0")

This is a syntactic mapping, not a version solver.
"""

from __future__ import annotations

from collections.abc import Callable

from cdv2spm.engines.dependency_resolver.models import SPMRequirement


def _compatible_release(version: str) -> SPMRequirement:
    # ~> pins everything but the last component given
    if len([part for part in version.split(".") if part]) >= 3:
        return SPMRequirement.up_to_next_minor(version)
    return SPMRequirement.up_to_next_major(version)


# Checked in order; two-character operators must precede their one-character prefixes.
_OPERATORS: list[tuple[str, Callable[[str], SPMRequirement]]] = [
    ("~>", _compatible_release),
    (">=", SPMRequirement.from_version),
    ("<=", SPMRequirement.up_to_next_major),
    ("=", SPMRequirement.exact),
    ("<", SPMRequirement.up_to_next_major),
    (">", SPMRequirement.from_version),
]


def translate(spec: str, source_tag: str | None = None) -> SPMRequirement:
    """Translate a CocoaPods *spec* into an :class:`SPMRequirement`.

    A *source_tag* from the podspec always wins over the constraint, since it
    names the exact ref the pod was published from. Total: every input gives
    a requirement, an empty spec gives ``exact("")``.
    """
    if source_tag is not None:
        return SPMRequirement.tag(source_tag)

    trimmed = spec.strip()
    for op, make in _OPERATORS:
        if trimmed.startswith(op):
            return make(trimmed[len(op) :].strip())
    return SPMRequirement.exact(trimmed)

"""Best-effort Package.swift scraper.

This is a syntactic extractor, not a Swift parser: it looks for the handful
of call shapes a library manifest is made of (``.package(url:)``,
``.library(...)``, ``.executable(...)``, ``.target(...)``) inside the named
``dependencies:`` / ``products:`` / ``targets:`` arrays. Anything it does not
recognise is skipped; it never raises.
"""

from __future__ import annotations

import re

import structlog

from cdv2spm.engines.dependency_resolver.models import (
    SPMDependency,
    SPMPackageInfo,
    SPMProduct,
    SPMRequirement,
    SPMTarget,
)

log = structlog.get_logger("cdv2spm.resolver")

_NAME_RE = re.compile(r'\bname:\s*"([^"]+)"')
_LIBRARY_CALL_RE = re.compile(r"\.library\s*\(")
_PACKAGE_CALL_RE = re.compile(r"\.package\s*\(")
_PRODUCT_CALL_RE = re.compile(r"\.(library|executable)\s*\(")
_TARGET_CALL_RE = re.compile(r"\.target\s*\(")
_URL_RE = re.compile(r'\burl:\s*"([^"]+)"')
_STRING_RE = re.compile(r'"([^"]*)"')
_PACKAGE_LABEL_RE = re.compile(r'\bpackage:\s*"[^"]*"')

# Requirement shapes inside a .package(...) call; first match wins.
_REQUIREMENT_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r'\.upToNextMinor\s*\(\s*from:\s*"([^"]+)"'), "up_to_next_minor"),
    (re.compile(r'\.upToNextMajor\s*\(\s*from:\s*"([^"]+)"'), "up_to_next_major"),
    (re.compile(r'\bfrom:\s*"([^"]+)"'), "from"),
    (re.compile(r'\bexact:\s*"([^"]+)"'), "exact"),
    (re.compile(r'\bbranch:\s*"([^"]+)"'), "branch"),
    (re.compile(r'\brevision:\s*"([^"]+)"'), "tag"),
]


class PackageManifestParser:
    """Extract :class:`SPMPackageInfo` from Package.swift text."""

    def parse(self, content: str) -> SPMPackageInfo:
        info = SPMPackageInfo(
            name=self._package_name(content),
            dependencies=tuple(self._dependencies(content)),
            products=tuple(self._products(content)),
            targets=tuple(self._targets(content)),
        )
        log.debug(
            "manifest.parsed",
            package=info.name,
            products=[p.name for p in info.products],
            dependencies=len(info.dependencies),
        )
        return info

    @staticmethod
    def is_library(content: str) -> bool:
        """Whether the manifest declares at least one ``.library(`` product."""
        return _LIBRARY_CALL_RE.search(content) is not None

    # ── sections ───────────────────────────────────────────────────────────

    @staticmethod
    def _package_name(content: str) -> str:
        m = _NAME_RE.search(content)
        return m.group(1).strip() if m else ""

    def _dependencies(self, content: str) -> list[SPMDependency]:
        section = extract_section(content, "dependencies", _PACKAGE_CALL_RE)
        if section is None:
            return []
        deps: list[SPMDependency] = []
        for call in _calls(section, _PACKAGE_CALL_RE):
            url = _URL_RE.search(call)
            if url is None:
                continue
            deps.append(SPMDependency(url=url.group(1), requirement=_requirement(call)))
        return deps

    def _products(self, content: str) -> list[SPMProduct]:
        section = extract_section(content, "products", _PRODUCT_CALL_RE)
        if section is None:
            return []
        products: list[SPMProduct] = []
        for m in _PRODUCT_CALL_RE.finditer(section):
            call = _balanced(section, m.end() - 1, "(", ")")
            if call is None:
                continue
            name = _NAME_RE.search(call)
            targets = extract_section(call, "targets")
            if name is None or targets is None:
                continue
            products.append(
                SPMProduct(
                    name=name.group(1),
                    type=m.group(1),  # type: ignore[arg-type]
                    targets=tuple(_STRING_RE.findall(targets)),
                )
            )
        return products

    def _targets(self, content: str) -> list[SPMTarget]:
        section = extract_section(content, "targets", _TARGET_CALL_RE)
        if section is None:
            return []
        targets: list[SPMTarget] = []
        for call in _calls(section, _TARGET_CALL_RE):
            name = _NAME_RE.search(call)
            if name is None:
                continue
            deps_section = extract_section(call, "dependencies")
            deps: tuple[str, ...] = ()
            if deps_section is not None:
                # .product(name: "X", package: "Y") -> X
                deps = tuple(_STRING_RE.findall(_PACKAGE_LABEL_RE.sub("", deps_section)))
            targets.append(SPMTarget(name=name.group(1), dependencies=deps))
        return targets


def _requirement(call: str) -> SPMRequirement:
    for pattern, kind in _REQUIREMENT_PATTERNS:
        m = pattern.search(call)
        if m:
            return SPMRequirement(kind, m.group(1))  # type: ignore[arg-type]
    return SPMRequirement.from_version("0.0.0")


def _calls(text: str, call_re: re.Pattern[str]) -> list[str]:
    """Argument text of every call matching *call_re* (which ends at the open paren)."""
    calls: list[str] = []
    for m in call_re.finditer(text):
        body = _balanced(text, m.end() - 1, "(", ")")
        if body is not None:
            calls.append(body)
    return calls


def extract_section(
    text: str, label: str, containing: re.Pattern[str] | None = None
) -> str | None:
    """Contents of the first ``label: [ ... ]`` array in *text*, brackets balanced.

    With *containing*, arrays that do not match it are skipped; products
    carry their own ``targets: [...]`` ahead of the package-level one.
    """
    for m in re.finditer(rf"\b{re.escape(label)}:\s*\[", text):
        body = _balanced(text, m.end() - 1, "[", "]")
        if body is None:
            continue
        if containing is None or containing.search(body):
            return body
    return None


def _balanced(text: str, start: int, open_ch: str, close_ch: str) -> str | None:
    """Text between ``text[start]`` (an *open_ch*) and its matching *close_ch*.

    String literals and ``//`` line comments are skipped so brackets inside
    them do not count. Returns None if the bracket is never closed.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            i += 1
            while i < n and text[i] != '"':
                i += 2 if text[i] == "\\" else 1
        elif ch == "/" and text.startswith("//", i):
            nl = text.find("\n", i)
            i = n if nl == -1 else nl
            continue
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start + 1 : i]
        i += 1
    return None

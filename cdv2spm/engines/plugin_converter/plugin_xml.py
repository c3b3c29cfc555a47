"""Read and rewrite Cordova plugin.xml descriptors."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from cdv2spm.engines.dependency_resolver.models import PodDependency
from cdv2spm.engines.plugin_converter.models import PluginMetadata
from cdv2spm.exceptions import (
    InvalidPluginXMLError,
    MissingPluginIdError,
    PluginXMLNotFoundError,
)

# Attribute text up to the closing '>', where quoted values may contain '>' (spec="~> 5.0").
_ATTRS = r"""(?:[^>"']|"[^"]*"|'[^']*')*?"""

_IOS_PLATFORM_TAG_RE = re.compile(
    rf"<platform\s+{_ATTRS}\bname\s*=\s*[\"']ios[\"']{_ATTRS}>", re.IGNORECASE
)
_PACKAGE_ATTR_RE = re.compile(r"\bpackage\s*=\s*(\"[^\"]*\"|'[^']*')")
_NOSPM_ATTR_RE = re.compile(r"\bnospm\s*=")
_POD_TAG_RE = re.compile(rf"<pod\b{_ATTRS}/?>")
_PODSPEC_BLOCK_RE = re.compile(r"[ \t]*<podspec\b[^>]*>[\s\S]*?</podspec>[ \t]*\n?")


def _local(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.split("}", 1)[-1] if "}" in tag else tag


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def parse_plugin_xml(path: str | Path) -> PluginMetadata:
    """Parse the plugin.xml file at *path*."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PluginXMLNotFoundError(str(path)) from exc
    return parse_plugin_xml_content(content)


def parse_plugin_xml_content(content: str) -> PluginMetadata:
    """Extract the plugin id and iOS pod dependencies from plugin.xml text.

    Only ``<platform name="ios">`` sections are read. Pods come from
    ``<podspec><pods><pod name=".." spec=".."/></pods></podspec>``;
    duplicates are dropped, first occurrence wins.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise InvalidPluginXMLError(str(exc)) from exc

    if _local(root.tag) != "plugin":
        raise InvalidPluginXMLError(f"root element is <{_local(root.tag)}>, expected <plugin>")

    plugin_id = root.get("id")
    if plugin_id is None:
        raise MissingPluginIdError()

    dependencies: list[PodDependency] = []
    has_podspec = False

    for platform in _children(root, "platform"):
        if (platform.get("name") or "").lower() != "ios":
            continue
        for podspec in _children(platform, "podspec"):
            has_podspec = True
            for pods in _children(podspec, "pods"):
                for pod in _children(pods, "pod"):
                    name = pod.get("name")
                    spec = pod.get("spec")
                    if name is None or spec is None:
                        continue
                    dep = PodDependency(name=name, spec=spec)
                    if dep not in dependencies:
                        dependencies.append(dep)

    return PluginMetadata(
        plugin_id=plugin_id,
        dependencies=tuple(dependencies),
        has_podspec=has_podspec,
        original_xml=content,
    )


def update_plugin_xml(
    metadata: PluginMetadata,
    *,
    remove_podspec: bool = False,
    add_nospm: bool = True,
) -> str:
    """Rewrite plugin.xml text for Swift Package Manager.

    Works on the raw text so formatting and comments survive:

    - every iOS ``<platform>`` tag gets ``package="swift"``
    - with *add_nospm*, ``<pod>`` elements get ``nospm="true"``
    - with *remove_podspec*, ``<podspec>`` blocks are dropped

    Pod and podspec edits only touch the body of iOS platform sections.
    """
    content = metadata.original_xml
    add_nospm = add_nospm and metadata.has_podspec and not remove_podspec

    parts: list[str] = []
    pos = 0
    for m in _IOS_PLATFORM_TAG_RE.finditer(content):
        tag = m.group(0)
        parts.append(content[pos : m.start()])
        parts.append(_with_package_swift(tag))
        pos = m.end()
        if tag.endswith("/>"):
            continue

        end = content.find("</platform", pos)
        if end == -1:
            end = len(content)
        body = content[pos:end]
        if remove_podspec:
            body = _PODSPEC_BLOCK_RE.sub("", body)
        elif add_nospm:
            body = _POD_TAG_RE.sub(_with_nospm, body)
        parts.append(body)
        pos = end

    parts.append(content[pos:])
    return "".join(parts)


def _with_package_swift(tag: str) -> str:
    if _PACKAGE_ATTR_RE.search(tag):
        return _PACKAGE_ATTR_RE.sub('package="swift"', tag, count=1)
    return _insert_attribute(tag, 'package="swift"')


def _with_nospm(m: re.Match[str]) -> str:
    tag = m.group(0)
    if _NOSPM_ATTR_RE.search(tag):
        return tag
    return _insert_attribute(tag, 'nospm="true"')


def _insert_attribute(tag: str, attribute: str) -> str:
    """Add *attribute* just before the closing ``>`` or ``/>`` of *tag*."""
    if tag.endswith("/>"):
        return f"{tag[:-2].rstrip()} {attribute}/>"
    return f"{tag[:-1].rstrip()} {attribute}>"

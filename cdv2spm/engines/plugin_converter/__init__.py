"""Plugin converter engine: turn a Cordova plugin.xml into a Swift package."""

from cdv2spm.engines.plugin_converter.converter import CordovaToSPMConverter
from cdv2spm.engines.plugin_converter.models import (
    ConversionOptions,
    ConversionResult,
    PluginMetadata,
)
from cdv2spm.engines.plugin_converter.package_generator import (
    generate_package_swift,
    validate_package_swift,
)
from cdv2spm.engines.plugin_converter.plugin_xml import (
    parse_plugin_xml,
    parse_plugin_xml_content,
    update_plugin_xml,
)

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "CordovaToSPMConverter",
    "PluginMetadata",
    "generate_package_swift",
    "parse_plugin_xml",
    "parse_plugin_xml_content",
    "update_plugin_xml",
    "validate_package_swift",
]

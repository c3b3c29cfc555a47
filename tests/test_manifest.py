"""Tests for the Package.swift scraper."""

from __future__ import annotations

from cdv2spm.engines.dependency_resolver.manifest import PackageManifestParser, extract_section
from cdv2spm.engines.dependency_resolver.models import SPMRequirement

_FULL = """\
// swift-tools-version:5.7
import PackageDescription

let package = Package(
    name: "Alamofire",
    platforms: [.iOS(.v12)],
    products: [
        .library(name: "Alamofire", targets: ["Alamofire"]),
        .library(name: "AlamofireDynamic", type: .dynamic, targets: ["Alamofire"]),
        .executable(name: "afcli", targets: ["CLI"])
    ],
    dependencies: [
        .package(url: "https://github.com/apple/swift-log.git", from: "1.4.0"),
        .package(url: "https://github.com/x/pinned.git", exact: "2.0.0"),
        .package(url: "https://github.com/x/minor.git", .upToNextMinor(from: "1.2.3")),
        .package(url: "https://github.com/x/major.git", .upToNextMajor(from: "3.0.0")),
        .package(url: "https://github.com/x/dev.git", branch: "develop"),
        .package(url: "https://github.com/x/rev.git", revision: "abc123"),
        .package(url: "https://github.com/x/bare.git", "1.0.0"..<"2.0.0"),
        .package(path: "../Local")
    ],
    targets: [
        .target(
            name: "Alamofire",
            dependencies: [
                .product(name: "Logging", package: "swift-log"),
                "Internal"
            ],
            path: "Source"),
        .target(name: "Internal"),
        .testTarget(name: "AlamofireTests", dependencies: ["Alamofire"])
    ]
)
"""


class TestParse:
    def test_name(self):
        assert PackageManifestParser().parse(_FULL).name == "Alamofire"

    def test_products_in_order(self):
        products = PackageManifestParser().parse(_FULL).products
        assert [(p.name, p.type) for p in products] == [
            ("Alamofire", "library"),
            ("AlamofireDynamic", "library"),
            ("afcli", "executable"),
        ]
        assert products[2].targets == ("CLI",)

    def test_dependency_requirements(self):
        deps = {d.url.rsplit("/", 1)[-1]: d.requirement for d in PackageManifestParser().parse(_FULL).dependencies}
        assert deps["swift-log.git"] == SPMRequirement.from_version("1.4.0")
        assert deps["pinned.git"] == SPMRequirement.exact("2.0.0")
        assert deps["minor.git"] == SPMRequirement.up_to_next_minor("1.2.3")
        assert deps["major.git"] == SPMRequirement.up_to_next_major("3.0.0")
        assert deps["dev.git"] == SPMRequirement.branch("develop")
        assert deps["rev.git"] == SPMRequirement.tag("abc123")
        assert deps["bare.git"] == SPMRequirement.from_version("0.0.0")

    def test_path_dependencies_skipped(self):
        urls = [d.url for d in PackageManifestParser().parse(_FULL).dependencies]
        assert len(urls) == 7
        assert all(u.startswith("https://") for u in urls)

    def test_targets(self):
        targets = PackageManifestParser().parse(_FULL).targets
        assert [t.name for t in targets] == ["Alamofire", "Internal"]
        assert targets[0].dependencies == ("Logging", "Internal")
        assert targets[1].dependencies == ()

    def test_library_targets_array_not_mistaken_for_package_targets(self):
        content = """
let package = Package(
    name: "Pkg",
    products: [.library(name: "Pkg", targets: ["Pkg"])],
    targets: [.target(name: "Pkg")]
)
"""
        targets = PackageManifestParser().parse(content).targets
        assert [t.name for t in targets] == ["Pkg"]

    def test_garbage_never_raises(self):
        info = PackageManifestParser().parse("this is ] not [ swift (((")
        assert info.name == ""
        assert info.products == ()
        assert info.dependencies == ()
        assert info.targets == ()

    def test_unterminated_section(self):
        info = PackageManifestParser().parse('let package = Package(name: "P", products: [.library(name: "P"')
        assert info.name == "P"
        assert info.products == ()


class TestIsLibrary:
    def test_library(self):
        assert PackageManifestParser.is_library(_FULL)

    def test_spacing(self):
        assert PackageManifestParser.is_library('products: [.library (name: "X", targets: ["X"])]')

    def test_executable_only(self):
        assert not PackageManifestParser.is_library('products: [.executable(name: "t", targets: ["T"])]')


class TestExtractSection:
    def test_brackets_inside_strings_and_comments(self):
        text = 'targets: ["a]", // ] comment\n "b"] trailing'
        assert extract_section(text, "targets") == '"a]", // ] comment\n "b"'

    def test_missing(self):
        assert extract_section("name: \"x\"", "targets") is None

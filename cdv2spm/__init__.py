"""cdv2spm: convert Cordova plugin.xml files to Swift Package Manager manifests."""

__version__ = "1.0.0"

"""apbuild - build-time provisioning for webrtc-audio-processing.

Builds (or downloads) the native audio processing library, compiles the C ABI
wrapper and generates Rust bindings for the -sys crate.
"""

__version__ = "0.1.0"

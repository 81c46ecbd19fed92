"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/wuurrd/webrtc-audio-processing"
KEYWORDS = "webrtc audio-processing bindgen meson ninja build-script rust ffi"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="apbuild",
        version="0.1.0",
        description="Build-time provisioning of webrtc-audio-processing for Rust bindings",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src", include=["apbuild", "apbuild.*"]),
        install_requires=[
            "requests",
            "tqdm",
            "psutil",
        ],
        extras_require={
            "test": [
                "pytest",
            ],
        },
        entry_points={
            "console_scripts": [
                "apbuild=apbuild.cli:main",
            ],
        },
    )

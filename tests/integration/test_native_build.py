"""
Integration tests for a real native build.

Runs the complete pipeline with the real meson, ninja, C++ compiler and
bindgen against a checkout of the bundled webrtc-audio-processing tree.
Point APBUILD_BUNDLED_SOURCE at the tree (defaults to
./webrtc-audio-processing) and run with --full.
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

TOOLS = ("meson", "ninja", "bindgen")


def bundled_source() -> Path:
    return Path(os.environ.get("APBUILD_BUNDLED_SOURCE", "webrtc-audio-processing")).resolve()


@pytest.mark.integration
class TestNativeBuild:
    """Integration tests for the source-build strategy"""

    @pytest.fixture
    def crate_env(self, tmp_path):
        """Environment for a build into a fresh OUT_DIR"""
        missing = [tool for tool in TOOLS if shutil.which(tool) is None]
        if missing:
            pytest.skip(f"missing tools: {', '.join(missing)}")
        source = bundled_source()
        if not source.is_dir() or not any(source.iterdir()):
            pytest.skip(f"bundled source not checked out at {source}")
        if sys.platform == "win32":
            pytest.skip("source build is not used on Windows")

        wrapper = tmp_path / "src"
        wrapper.mkdir()
        (wrapper / "wrapper.hpp").write_text("namespace webrtc_audio_processing_wrapper {\nint version();\n}\n")
        (wrapper / "wrapper.cpp").write_text('#include "wrapper.hpp"\nint webrtc_audio_processing_wrapper::version() { return 1; }\n')

        env = os.environ.copy()
        env.update(
            {
                "OUT_DIR": str(tmp_path / "out"),
                "APBUILD_BUNDLED_SOURCE": str(source),
                "APBUILD_WRAPPER_SOURCE": str(wrapper / "wrapper.cpp"),
                "APBUILD_WRAPPER_HEADER": str(wrapper / "wrapper.hpp"),
            }
        )
        return env

    def run_build(self, env, *args):
        return subprocess.run(
            [sys.executable, "-m", "apbuild", "build", *args],
            env=env,
            capture_output=True,
            text=True,
        )

    def test_full_build_success(self, crate_env):
        result = self.run_build(crate_env, "--derive-serde")

        assert result.returncode == 0, result.stderr
        out_dir = Path(crate_env["OUT_DIR"])
        lib_dir = out_dir / "webrtc-audio-processing" / "lib"
        assert any(lib_dir.rglob("libwebrtc_audio_processing*.a"))
        assert (out_dir / "libwebrtc_audio_processing_wrapper.a").exists()
        assert (out_dir / "bindings.rs").read_text().startswith("use serde::{Serialize, Deserialize};")
        assert "cargo:rustc-link-lib=static=webrtc_audio_processing" in result.stdout

    def test_rebuild_is_incremental(self, crate_env):
        first = self.run_build(crate_env)
        assert first.returncode == 0, first.stderr

        second = self.run_build(crate_env, "-v")

        assert second.returncode == 0, second.stderr
        log = (Path(crate_env["OUT_DIR"]) / "apbuild.log").read_text()
        assert "is current" in log

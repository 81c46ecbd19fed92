"""Ctrl-C handling around blocking tool invocations.

meson, ninja and bindgen can run for minutes. An interrupt that arrives while
subprocess.run is waiting must still stop the whole build, including when the
wait happens off the main thread.
"""

import _thread


def handle_keyboard_interrupt_properly(ke: KeyboardInterrupt) -> None:
    """Forward ke to the main thread and re-raise it.

    Usage:
        try:
            subprocess.run(["ninja"], cwd=build_dir)
        except KeyboardInterrupt as ke:
            handle_keyboard_interrupt_properly(ke)

    Raises:
        KeyboardInterrupt: Always
    """
    _thread.interrupt_main()
    raise ke

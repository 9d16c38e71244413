"""Launch the viewer page through Streamlit's CLI."""
import os
import sys

from flightview.error_handling import configure_logging

APP_FILE = "app.py"


def app_path() -> str:
    # PyInstaller onefile bundles unpack next to sys._MEIPASS
    base = getattr(sys, "_MEIPASS", os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base, APP_FILE)


def main(extra_args=None) -> int:
    from streamlit.web import cli as stcli

    args = list(extra_args if extra_args is not None else sys.argv[1:])
    configure_logging()
    sys.argv = ["streamlit", "run", app_path(), "--server.headless=true"] + args
    return stcli.main()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

import argparse
import logging
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication

from PX_Libs.ImageEditingLib.image_editor_window import PixelsEditorWindow


def main() -> None:
    parser = argparse.ArgumentParser(description="Pixels photo editor")
    parser.add_argument("image", nargs="?", type=Path, help="Image to open on start")
    parser.add_argument("--debug", action="store_true", help="Log render and gesture detail")
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication([sys.argv[0]] + qt_args)
    window = PixelsEditorWindow()
    window.show()
    if args.image is not None:
        window.load_path(args.image)
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()

#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/__main__.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import argparse
import sys

from .config import LoadConfig
from .errors import LoadError
from .loader import load
from .logging_config import setup_logging


def parse_args(argv=None):
    epilog = """\
examples:
  %(prog)s cube.glb                     Scene/camera/light/model counts
  %(prog)s scene.gltf --no-images       Skip texture decoding
  %(prog)s scene.gltf -v                Log cache activity
"""
    parser = argparse.ArgumentParser(
        prog="python -m gltf_scene_loader",
        description="Flatten a glTF 2.0 file and summarize its scenes",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("path", help="Path to a .gltf or .glb file")
    parser.add_argument("--no-images", action="store_true",
                        help="Do not decode textures")
    parser.add_argument("--no-names", action="store_true",
                        help="Do not copy object names")
    parser.add_argument("--extras", action="store_true",
                        help="Copy extras dictionaries")
    parser.add_argument("--no-colors", action="store_true",
                        help="Ignore vertex colors")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for INFO, -vv for DEBUG logging")
    return parser.parse_args(argv)


def describe(scenes, out=None):
    out = out or sys.stdout
    for i, scene in enumerate(scenes):
        title = f"Scene #{i}" + (f" ({scene.name})" if scene.name else "")
        print(f"{title}: cameras={len(scene.cameras)} lights={len(scene.lights)} "
              f"models={len(scene.models)}", file=out)
        for model in scene.models:
            label = model.mesh_name or "<unnamed>"
            print(f"  {label}[{model.primitive_index}] {model.mode.name} "
                  f"vertices={len(model.vertices)}", file=out)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(("WARNING", "INFO", "DEBUG")[min(args.verbose, 2)])

    config = LoadConfig.from_env()
    if args.no_images:
        config.load_images = False
    if args.no_names:
        config.load_names = False
    if args.extras:
        config.load_extras = True
    if args.no_colors:
        config.vertex_colors = False

    try:
        scenes = load(args.path, config)
    except LoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    describe(scenes)
    return 0


if __name__ == "__main__":
    sys.exit(main())

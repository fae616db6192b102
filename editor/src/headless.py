"""Pasteup headless CLI: inspect and edit a saved editor state.

Works on the same data directory the editor uses (metadata.json plus the
images/ store), so projects can be scripted without a window.

Usage:
    pasteup [--data-dir DIR] [--config FILE] [-v] <command> [args]

Examples:
    pasteup info
    pasteup add photo.png logo.png
    pasteup export project.json
    pasteup --data-dir /tmp/scratch import project.json
    pasteup undo
    pasteup gc
"""

import sys
import os
import argparse
import logging

# Add editor/src to path so imports work when run as a script
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from services.session import EditorSession
from utils.config import load_config
from version import get_version


def _cmd_info(session, args):
    layers = session.layers.get_layers()
    selected_id = session.layers.get_selected_layer_id()
    box = session.viewport.view_box
    print(f"Layers: {len(layers)} (bottom to top)")
    for index, layer in enumerate(layers):
        flags = ''.join([
            '*' if layer.id == selected_id else ' ',
            'H' if not layer.visible else ' ',
            'L' if layer.locked else ' ',
        ])
        print(f"  [{index}] {flags} {layer.name!r} {layer.width:g}x{layer.height:g} "
              f"at ({layer.x:g}, {layer.y:g}) rot {layer.display_rotation:g} "
              f"opacity {layer.opacity:g} {layer.blend_mode} id={layer.id}")
    print(f"ViewBox: x={box.x:g} y={box.y:g} w={box.w:g} h={box.h:g} (zoom {session.viewport.zoom_level:.0%})")
    print(f"History: {len(session.history.undo_stack)} undo, {len(session.history.redo_stack)} redo")
    stored = session.images.list_ids().result()
    print(f"Images stored: {len(stored)}")
    return 0


def _cmd_add(session, args):
    added = session.ingest_files(args.images)
    for layer_id in added:
        layer = session.layers.get_layer(layer_id)
        print(f"Added {layer.name} ({layer.width:g}x{layer.height:g}) id={layer_id}")
    if len(added) < len(args.images):
        print(f"Error: {len(args.images) - len(added)} file(s) could not be added", file=sys.stderr)
        return 1
    return 0


def _cmd_export(session, args):
    session.save_project_file(args.file)
    print(f"Exported {len(session.layers)} layer(s) to {args.file}")
    return 0


def _cmd_import(session, args):
    count = session.load_project_file(args.file)
    print(f"Imported {count} layer(s) from {args.file}")
    return 0


def _cmd_undo(session, args):
    print("Undone" if session.undo() else "Nothing to undo")
    return 0


def _cmd_redo(session, args):
    print("Redone" if session.redo() else "Nothing to redo")
    return 0


def _cmd_gc(session, args):
    deleted = session.collect_garbage()
    for image_id in deleted:
        print(f"  deleted {image_id}")
    print(f"Removed {len(deleted)} unreferenced image(s)")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='pasteup',
        description='Inspect and edit a Pasteup layer editor state (headless).',
    )
    parser.add_argument(
        '--data-dir',
        help='Editor data directory (default: ~/.pasteup or $PASTEUP_DATA_DIR).',
    )
    parser.add_argument(
        '--config',
        help='Path to a JSON config file (default: ~/.pasteup/config.json).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {get_version()}',
    )

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('info', help='List layers, viewbox and history depth.').set_defaults(func=_cmd_info)

    add = commands.add_parser('add', help='Add image files as new layers.')
    add.add_argument('images', nargs='+', help='Image files to add.')
    add.set_defaults(func=_cmd_add)

    export = commands.add_parser('export', help='Write a self-contained project file.')
    export.add_argument('file', help='Output JSON path.')
    export.set_defaults(func=_cmd_export)

    imp = commands.add_parser('import', help='Replace the state with a project file.')
    imp.add_argument('file', help='Project JSON path.')
    imp.set_defaults(func=_cmd_import)

    commands.add_parser('undo', help='Undo the last edit.').set_defaults(func=_cmd_undo)
    commands.add_parser('redo', help='Redo the last undone edit.').set_defaults(func=_cmd_redo)
    commands.add_parser('gc', help='Delete unreferenced stored images.').set_defaults(func=_cmd_gc)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.data_dir:
        config.data_dir = args.data_dir

    # Logging
    level = logging.DEBUG if args.verbose else getattr(logging, str(config.log_level).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    session = EditorSession.from_config(config)
    try:
        session.load()
        return args.func(session, args)
    except (OSError, ValueError) as e:
        # ProjectValidationError is a ValueError
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()


if __name__ == '__main__':
    sys.exit(main())
